"""
Request routing against the frozen prefix registry.

resolve() is a pure function of (registry, path): it never touches
the response and only reads the filesystem to tell directories from
files. The Flask view in app.py turns the returned Route into a
response.
"""
from pathlib import Path
from typing import NamedTuple, Optional, Tuple

from .models import MODE_ALL, Folder, Registry, Video

ROOT = "root"
REDIRECT = "redirect"
DIRECTORY = "directory"
FILE = "file"
DISCOVERY = "discovery"
NOT_FOUND = "not_found"

DISCOVERY_PATH = "/videourls"


class Route(NamedTuple):
    state: str
    prefix: Optional[str] = None
    path: Optional[str] = None        # filesystem target for DIRECTORY / FILE in all mode
    location: Optional[str] = None    # REDIRECT target
    videos: Tuple[Video, ...] = ()


def safe_resolve_within_root(root: str, rel_path: str) -> Path:
    """
    Resolve a user-supplied relative path and ensure it is inside root.
    Raises ValueError if outside root.
    """
    root_dir = Path(root).resolve()
    candidate = (root_dir / rel_path).resolve()
    try:
        candidate.relative_to(root_dir)
    except ValueError:
        raise ValueError("Path is outside the allowed root")
    return candidate


def _target(prefix, fs_path):
    state = DIRECTORY if Path(fs_path).is_dir() else FILE
    return Route(state, prefix=prefix, path=str(fs_path))


def _resolve_inside(folder: Folder, url_path: str) -> Route:
    rel_path = url_path[len(folder.name):]
    try:
        target = safe_resolve_within_root(folder.path, rel_path)
    except ValueError:
        return Route(NOT_FOUND)

    if target.is_dir():
        if not url_path.endswith("/"):
            return Route(REDIRECT, prefix=folder.name, location=url_path + "/")
        return Route(DIRECTORY, prefix=folder.name, path=str(target))
    if target.is_file():
        if url_path.endswith("/"):
            return Route(REDIRECT, prefix=folder.name, location=url_path.rstrip("/"))
        return Route(FILE, prefix=folder.name, path=str(target))
    return Route(NOT_FOUND)


def resolve_all(registry: Registry, path: str) -> Route:
    if path == "/":
        return Route(ROOT)

    for prefix, folder in registry.entries.items():
        if path == prefix:
            return _target(prefix, folder.path)
        if path == prefix.rstrip("/"):
            return Route(REDIRECT, prefix=prefix, location=prefix)

    # below a prefix: only ever looks inside that prefix's root
    for prefix, folder in registry.entries.items():
        if path.startswith(prefix):
            return _resolve_inside(folder, path)

    return Route(NOT_FOUND)


def resolve_videos(registry: Registry, path: str) -> Route:
    if path == DISCOVERY_PATH:
        return Route(DISCOVERY)
    if path == "/":
        return Route(ROOT)

    for prefix, videos in registry.entries.items():
        if path == prefix:
            return Route(DIRECTORY, prefix=prefix, videos=videos)
        if path == prefix.rstrip("/"):
            return Route(REDIRECT, prefix=prefix, location=prefix)

    for prefix, videos in registry.entries.items():
        for video in videos:
            if path == video.path:
                return Route(FILE, prefix=prefix, path=video.file_path, videos=(video,))

    return Route(NOT_FOUND)


def resolve(registry: Registry, path: str) -> Route:
    """Map an incoming URL path to a Route for the registry's mode"""
    if registry.mode == MODE_ALL:
        return resolve_all(registry, path)
    return resolve_videos(registry, path)


def discovery_document(registry: Registry) -> dict:
    """JSON body for /videourls: every prefix with its public video list"""
    if registry.mode == MODE_ALL:
        return {"folders": []}
    return {
        "folders": [
            {"name": prefix, "videos": [video.public() for video in videos]}
            for prefix, videos in registry.entries.items()
        ]
    }
