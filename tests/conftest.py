import os

import pytest

import cdmark.config
from cdmark.store import RecordStore


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Keep every test away from the real home directory and config."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for key in list(os.environ):
        if key.startswith("CDMARK_"):
            monkeypatch.delenv(key)
    monkeypatch.setattr(cdmark.config, "_config", None)
    yield


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """A scratch directory tree used as the current directory."""
    root = tmp_path / "work"
    for name in ("alpha", "beta", "gamma", "delta"):
        (root / name).mkdir(parents=True)
    monkeypatch.chdir(root)
    return root


@pytest.fixture
def bookmark_file(tmp_path):
    """Path of the bookmark file under test (not created yet)."""
    return tmp_path / "data" / "dir_bookmarks"


@pytest.fixture
def store(bookmark_file):
    """A store on an empty bookmark file."""
    return RecordStore(bookmark_file)


@pytest.fixture
def populated_store(store, workdir):
    """
    A store holding, in order:

        1  normal  alpha  (name: a)
        2  normal  beta
        3  bound   gamma  (name: g)
        4  bound   delta
    """
    real = os.path.realpath
    lines = [
        f"0|a|{real(workdir / 'alpha')}",
        f"0||{real(workdir / 'beta')}",
        f"1|g|{real(workdir / 'gamma')}",
        f"1||{real(workdir / 'delta')}",
    ]
    store.path.parent.mkdir(parents=True, exist_ok=True)
    store.path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return store