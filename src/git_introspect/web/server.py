"""Launch the HTTP adapter under uvicorn."""
from __future__ import annotations

from git_introspect.config import Settings


def launch(
    settings: Settings | None = None,
    host: str = "127.0.0.1",
    port: int = 8000,
    log_level: str = "warning",
) -> None:
    import uvicorn

    from git_introspect.web.api import app

    if settings is not None:
        app.state.settings = settings
    uvicorn.run(app, host=host, port=port, log_level=log_level)
