"""
Pytest configuration & shared fixtures
"""
import os

import pytest

from lanshare.app import create_app
from lanshare.build import build_registry
from lanshare.log import logger
from lanshare.models import MODE_ALL, MODE_VIDEOS


# ========================================
# Logging
# ========================================

@pytest.fixture(autouse=True)
def restore_logger():
    """main() installs a stderr handler; drop it so later tests do not write to a closed stream"""
    handlers, level = logger.handlers[:], logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)


# ========================================
# Filesystem fixtures
# ========================================

@pytest.fixture
def video_tree(tmp_path):
    """
    media/
        a.mp4
        notes.txt
        sub/
            Clip.MKV
            deeper/
                d.webm
        z.avi
    """
    root = tmp_path / "media"
    (root / "sub" / "deeper").mkdir(parents=True)
    (root / "a.mp4").write_bytes(b"mp4 bytes")
    (root / "notes.txt").write_text("not a video")
    (root / "sub" / "Clip.MKV").write_bytes(b"mkv bytes")
    (root / "sub" / "deeper" / "d.webm").write_bytes(b"webm bytes")
    (root / "z.avi").write_bytes(b"avi bytes")
    return root


@pytest.fixture
def second_tree(tmp_path):
    root = tmp_path / "more"
    root.mkdir()
    (root / "clip.mov").write_bytes(b"mov bytes")
    return root


@pytest.fixture
def empty_dir(tmp_path):
    root = tmp_path / "empty"
    root.mkdir()
    (root / "readme.md").write_text("no videos here")
    return root


@pytest.fixture
def deny_scandir(monkeypatch):
    """Make os.scandir raise PermissionError for the given directories"""
    real_scandir = os.scandir
    denied = set()

    def fake_scandir(path="."):
        if os.fspath(path) in denied:
            raise PermissionError(13, "Permission denied", os.fspath(path))
        return real_scandir(path)

    monkeypatch.setattr(os, "scandir", fake_scandir)

    def _deny(*paths):
        denied.update(os.fspath(p) for p in paths)
    return _deny


# ========================================
# Registry / application fixtures
# ========================================

@pytest.fixture
def all_registry(video_tree, second_tree):
    return build_registry([str(video_tree), str(second_tree)], MODE_ALL)


@pytest.fixture
def videos_registry(video_tree, second_tree):
    return build_registry([str(video_tree), str(second_tree)], MODE_VIDEOS)


@pytest.fixture
def all_client(all_registry):
    """Flask test client serving in all mode"""
    return create_app(all_registry).test_client()


@pytest.fixture
def videos_client(videos_registry):
    """Flask test client serving in videos mode"""
    return create_app(videos_registry).test_client()
