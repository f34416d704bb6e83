from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import FastAPI, Path, Query, Request
from fastapi.responses import JSONResponse

from git_introspect.application.use_cases import (
    count_commits,
    get_last_commit,
    get_repository_overview,
    list_branches,
    list_directory,
    resolve_object,
)
from git_introspect.config import Settings, load_settings
from git_introspect.domain.errors import (
    InvalidArgument,
    InvalidState,
    NotFound,
    ProcessFailure,
    ProcessTimeout,
)
from git_introspect.infrastructure.git_cli_reader import GitCliReader
from git_introspect.infrastructure.git_format import printable
from git_introspect.infrastructure.locator import repository_path
from git_introspect.infrastructure.process_runner import ProcessRunner
from git_introspect.web.models import (
    CommitCountOut,
    CommitOut,
    ObjectIdentityOut,
    RepositoryOverviewOut,
    TreeEntryOut,
)

logger = logging.getLogger(__name__)

_IDENTIFIER = r"^[A-Za-z0-9_-][A-Za-z0-9_.-]*$"


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = getattr(app.state, "settings", None)
    if settings is None:
        settings = load_settings()
        app.state.settings = settings
    app.state.runner = ProcessRunner(
        max_processes=settings.max_processes, timeout=settings.timeout
    )
    yield


app = FastAPI(title="git-introspect", lifespan=lifespan)


def _settings() -> Settings:
    return app.state.settings


def _reader(owner: str, name: str) -> GitCliReader:
    settings = _settings()
    return GitCliReader(
        repository_path(settings.root, owner, name),
        runner=app.state.runner,
        git_binary=settings.git_binary,
    )


@app.exception_handler(NotFound)
async def _not_found(request: Request, exc: NotFound):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(InvalidArgument)
async def _invalid_argument(request: Request, exc: InvalidArgument):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(InvalidState)
async def _invalid_state(request: Request, exc: InvalidState):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(ProcessTimeout)
async def _process_timeout(request: Request, exc: ProcessTimeout):
    return JSONResponse(status_code=504, content={"detail": "Git command timed out"})


@app.exception_handler(ProcessFailure)
async def _process_failure(request: Request, exc: ProcessFailure):
    # stderr may leak filesystem layout; keep it in the log only
    logger.error("Git failure on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "Git command failed"})


Owner = Annotated[str, Path(pattern=_IDENTIFIER, description="Repository owner")]
Name = Annotated[str, Path(pattern=_IDENTIFIER, description="Repository name")]


@app.get("/api/repos/{owner}/{name}", response_model=RepositoryOverviewOut)
async def repository_overview(owner: Owner, name: Name):
    reader = _reader(owner, name)
    overview = await get_repository_overview(
        reader, reader.path, _settings().default_branch
    )
    return RepositoryOverviewOut.from_domain(overview)


@app.get("/api/repos/{owner}/{name}/branches", response_model=list[str])
async def branches(owner: Owner, name: Name):
    found = await list_branches(_reader(owner, name), _settings().default_branch)
    return [printable(branch) for branch in found]


@app.get("/api/repos/{owner}/{name}/commits/last", response_model=CommitOut)
async def last_commit(
    owner: Owner,
    name: Name,
    ref: str | None = Query(None, description="Branch, tag or commit hash"),
    path: str | None = Query(None, description="Restrict to this file or folder"),
):
    commit = await get_last_commit(
        _reader(owner, name), ref or _settings().default_branch, path
    )
    return CommitOut.from_domain(commit)


@app.get("/api/repos/{owner}/{name}/commits/count", response_model=CommitCountOut)
async def commit_count(
    owner: Owner,
    name: Name,
    ref: str | None = Query(None, description="Branch, tag or commit hash"),
):
    ref = ref or _settings().default_branch
    return CommitCountOut(ref=ref, count=await count_commits(_reader(owner, name), ref))


@app.get("/api/repos/{owner}/{name}/tree", response_model=list[TreeEntryOut])
async def tree(
    owner: Owner,
    name: Name,
    ref: str | None = Query(None, description="Branch, tag or commit hash"),
    path: str = Query("", description="Folder path; empty for the root"),
):
    entries = await list_directory(
        _reader(owner, name), ref or _settings().default_branch, path
    )
    return [TreeEntryOut.from_domain(e) for e in entries]


@app.get("/api/repos/{owner}/{name}/object", response_model=ObjectIdentityOut)
async def object_identity(
    owner: Owner,
    name: Name,
    path: str = Query(..., description="File or folder path"),
    ref: str | None = Query(None, description="Branch, tag or commit hash"),
):
    identity = await resolve_object(
        _reader(owner, name), ref or _settings().default_branch, path
    )
    return ObjectIdentityOut.from_domain(identity)
