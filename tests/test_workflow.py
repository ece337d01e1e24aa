"""Tests for RepoSyncWorkflow: the update/upgrade toggles and error propagation."""

from pathlib import Path

import pytest
import yaml

from conftest import FakeGitOperator, requires_git, write_git_config
from reposync.config.schemas import RepositoryEntry, RuntimeOptions
from reposync.core.errors import ManifestNotFoundError, RemoteNotFoundError
from reposync.core.reconciler import RepoOutcome
from reposync.core.workflow import RepoSyncWorkflow


def _write_manifest(root: Path, repos):
    path = root / "repositories.txt"
    path.write_text(yaml.safe_dump({"repos": repos}, sort_keys=False))
    return path


def _read_manifest(root: Path):
    return yaml.safe_load((root / "repositories.txt").read_text())["repos"]


@requires_git
def test_update_and_upgrade(tmp_path: Path):
    write_git_config(tmp_path / "b", url="u2")
    a_dir, b_dir = str(tmp_path / "a"), str(tmp_path / "b")
    _write_manifest(tmp_path, [{"directory": a_dir, "remote": "u1"}])
    git = FakeGitOperator(existing={b_dir})

    summary = RepoSyncWorkflow(RuntimeOptions(root_dir=str(tmp_path)), git).run()

    assert _read_manifest(tmp_path) == [
        {"directory": a_dir, "remote": "u1"},
        {"directory": b_dir, "remote": "u2"},
    ]
    assert [r.entry for r in summary.results] == [RepositoryEntry(a_dir, "u1"), RepositoryEntry(b_dir, "u2")]
    assert git.ops_for(a_dir) == ["clone", "fetch", "status", "pull"]
    assert git.ops_for(b_dir) == ["fetch", "status", "pull"]


def test_no_update_leaves_manifest_untouched(tmp_path: Path):
    write_git_config(tmp_path / "b", url="u2")
    path = _write_manifest(tmp_path, [{"directory": "/r/a", "remote": "u1"}])
    original = path.read_text()
    git = FakeGitOperator()

    summary = RepoSyncWorkflow(RuntimeOptions(root_dir=str(tmp_path), update=False), git).run()

    assert path.read_text() == original
    assert [r.entry.directory for r in summary.results] == ["/r/a"]


@requires_git
def test_no_upgrade_skips_reconciliation(tmp_path: Path):
    write_git_config(tmp_path / "b", url="u2")
    _write_manifest(tmp_path, [])
    git = FakeGitOperator()

    summary = RepoSyncWorkflow(RuntimeOptions(root_dir=str(tmp_path), upgrade=False), git).run()

    assert summary is None
    assert git.calls == []
    assert _read_manifest(tmp_path) == [{"directory": str(tmp_path / "b"), "remote": "u2"}]


def test_missing_manifest_aborts(tmp_path: Path):
    git = FakeGitOperator()
    with pytest.raises(ManifestNotFoundError):
        RepoSyncWorkflow(RuntimeOptions(root_dir=str(tmp_path)), git).run()
    assert git.calls == []


@requires_git
def test_discovery_failure_aborts_before_upgrade(tmp_path: Path):
    write_git_config(tmp_path / "b", url=None)
    path = _write_manifest(tmp_path, [{"directory": "/r/a", "remote": "u1"}])
    original = path.read_text()
    git = FakeGitOperator()

    with pytest.raises(RemoteNotFoundError):
        RepoSyncWorkflow(RuntimeOptions(root_dir=str(tmp_path)), git).run()

    assert git.calls == []
    assert path.read_text() == original


def test_repository_failures_do_not_abort(tmp_path: Path):
    _write_manifest(tmp_path, [
        {"directory": "/r/a", "remote": "u1"},
        {"directory": "/r/b", "remote": "u2"},
    ])
    git = FakeGitOperator(failures={("clone", "/r/a"): "denied", ("clone", "/r/b"): "denied"})

    summary = RepoSyncWorkflow(RuntimeOptions(root_dir=str(tmp_path), update=False), git).run()

    assert summary.failed == 2
    assert all(r.outcome is RepoOutcome.FAILED for r in summary.results)
