import sys

import pytest

from git_introspect.interface import cli
from git_introspect.interface.cli import main


def _run(monkeypatch, *argv):
    monkeypatch.setattr(sys, "argv", ["git-introspect", *argv])
    main()


class TestRepoCommands:
    def test_overview(self, project_repo, repos_root, capsys, monkeypatch):
        _run(monkeypatch, "--root", str(repos_root), "overview", "alice", "project")
        out = capsys.readouterr().out
        assert "Repository:" in out
        assert "Branches:   master, " in out
        assert "Commits:    6" in out
        assert "Subject:   Update README" in out

    def test_overview_empty(self, empty_bare_repo, repos_root, capsys, monkeypatch):
        _run(monkeypatch, "--root", str(repos_root), "overview", "alice", "empty")
        assert "No commits yet." in capsys.readouterr().out

    def test_branches(self, project_repo, repos_root, capsys, monkeypatch):
        _run(monkeypatch, "--root", str(repos_root), "branches", "alice", "project")
        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "master"
        assert sorted(lines) == ["develop", "feature", "master"]

    def test_last_commit_for_path(self, project_repo, repos_root, capsys, monkeypatch):
        _run(monkeypatch, "--root", str(repos_root), "last-commit", "alice", "project",
             "src/utils.py")
        out = capsys.readouterr().out
        assert "Committer: Bob <bob@example.com>" in out
        assert "Subject:   Add utils" in out

    def test_tree(self, project_repo, repos_root, capsys, monkeypatch):
        _run(monkeypatch, "--root", str(repos_root), "tree", "alice", "project", "src")
        out = capsys.readouterr().out
        assert "src/main.py" in out
        assert "src/utils.py" in out
        assert "Update main" in out

    def test_object(self, project_repo, repos_root, capsys, monkeypatch):
        _run(monkeypatch, "--root", str(repos_root), "object", "alice", "project", "docs")
        assert capsys.readouterr().out.startswith("tree ")

    def test_count_with_ref(self, project_repo, repos_root, capsys, monkeypatch):
        _run(monkeypatch, "--root", str(repos_root), "count", "alice", "project",
             "--ref", "develop")
        assert capsys.readouterr().out.strip() == "4"

    def test_root_from_environment(self, project_repo, repos_root, capsys, monkeypatch):
        monkeypatch.setenv("GIT_INTROSPECT_ROOT", str(repos_root))
        _run(monkeypatch, "count", "alice", "project")
        assert capsys.readouterr().out.strip() == "6"


class TestErrors:
    def test_unknown_repository_exits_with_error(self, repos_root, capsys, monkeypatch):
        with pytest.raises(SystemExit) as exc_info:
            _run(monkeypatch, "--root", str(repos_root), "branches", "alice", "ghost")
        assert exc_info.value.code == 1
        assert "Error: Not a git repository" in capsys.readouterr().err

    def test_missing_folder_exits_with_error(self, project_repo, repos_root, capsys, monkeypatch):
        with pytest.raises(SystemExit) as exc_info:
            _run(monkeypatch, "--root", str(repos_root), "tree", "alice", "project", "nope")
        assert exc_info.value.code == 1
        assert "Folder does not exist" in capsys.readouterr().err

    def test_hostile_ref_exits_with_error(self, project_repo, repos_root, capsys, monkeypatch):
        with pytest.raises(SystemExit) as exc_info:
            _run(monkeypatch, "--root", str(repos_root), "count", "alice", "project",
                 "--ref=--all")
        assert exc_info.value.code == 1
        assert "Error:" in capsys.readouterr().err

    def test_missing_command(self, capsys, monkeypatch):
        with pytest.raises(SystemExit) as exc_info:
            _run(monkeypatch)
        assert exc_info.value.code == 2


class TestServe:
    def test_serve_launches_with_root(self, tmp_path, monkeypatch):
        seen = {}

        def fake_launch(settings, host, port, log_level):
            seen.update(root=settings.root, host=host, port=port, log_level=log_level)

        monkeypatch.setattr("git_introspect.web.server.launch", fake_launch)
        _run(monkeypatch, "--root", str(tmp_path), "serve", "--port", "8123")
        assert seen == {"root": tmp_path, "host": "127.0.0.1", "port": 8123, "log_level": "warning"}


def test_verbose_enables_debug_logging(monkeypatch):
    calls = []
    monkeypatch.setattr(cli.logging, "basicConfig", lambda **kw: calls.append(kw))
    cli._configure_logging(verbose=True)
    assert calls[0]["level"] == cli.logging.DEBUG
