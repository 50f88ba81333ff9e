import os

from .log import log
from .models import MODE_ALL, MODES, ConfigError, Folder, Registry, Video

DEFAULT_VIDEO_EXTENSIONS = (".mp4", ".avi", ".mkv", ".mov", ".webm")
PREFIX_FORMAT = "/dir{}/"
ALIAS_FORMAT = "video{}"


def is_video(filename, extensions):
    """True if the lower-cased filename ends with one of the extensions"""
    name = filename.lower()
    return any(name.endswith(ext) for ext in extensions)


def merge_extensions(extra=()):
    """Default video extensions followed by any extra ones not already present"""
    extensions = list(DEFAULT_VIDEO_EXTENSIONS)
    for ext in extra:
        ext = ext.strip().lower()
        if ext and ext not in extensions:
            extensions.append(ext)
    return tuple(extensions)


def resolve_root(directory):
    """Absolute path of an operator-supplied directory, or None if it cannot be resolved"""
    try:
        return os.path.abspath(directory)
    except (OSError, ValueError) as e:
        log(f"Error getting absolute path for {directory}: {e}", "ERROR")
        return None


def _scan(path, prefix, extensions, found):
    """Depth-first scan appending matches to found; raises OSError on the first unreadable node"""
    with os.scandir(path) as it:
        entries = sorted(it, key=lambda e: e.name)

    for entry in entries:
        if entry.is_dir(follow_symlinks=False):
            _scan(entry.path, prefix, extensions, found)
        elif is_video(entry.name, extensions):
            alias = prefix + ALIAS_FORMAT.format(len(found) + 1)
            found.append(Video(name=entry.name, path=alias, file_path=entry.path))


def walk_videos(root, prefix, extensions=DEFAULT_VIDEO_EXTENSIONS):
    """
    Collect the videos under root, numbered video1..videoN below prefix.

    The walk stops at the first node it cannot read; whatever was found
    up to that point is kept.
    """
    found = []
    try:
        if os.path.isdir(root):
            _scan(root, prefix, extensions, found)
        elif os.path.lexists(root):
            name = os.path.basename(root)
            if is_video(name, extensions):
                found.append(Video(name=name, path=prefix + ALIAS_FORMAT.format(1), file_path=root))
        else:
            raise FileNotFoundError(f"No such file or directory: '{root}'")
    except OSError as e:
        log(f"Error walking directory {root}: {e}", "ERROR")

    log(f"Found {len(found)} videos under {root}", "DEBUG")
    return tuple(found)


def build_registry(directories, mode=MODE_ALL, extensions=DEFAULT_VIDEO_EXTENSIONS):
    """Build the prefix table for the given directories; called once before serving"""
    if mode not in MODES:
        raise ConfigError(f"Option {mode} NOT valid")

    entries = {}

    if mode == MODE_ALL:
        for index, directory in enumerate(directories, start=1):
            path = resolve_root(directory)
            if path is None:
                continue
            prefix = PREFIX_FORMAT.format(index)
            entries[prefix] = Folder(name=prefix, path=path)
        return Registry(mode, entries)

    counter = 1
    for directory in directories:
        path = resolve_root(directory)
        if path is None:
            continue
        prefix = PREFIX_FORMAT.format(counter)
        videos = walk_videos(path, prefix, extensions)
        if videos:
            entries[prefix] = videos
        counter += 1

    return Registry(mode, entries)


def describe_registry(registry, host, port):
    """Console lines associating each served URL with its filesystem path"""
    base = f"http://{host}:{port}"
    if registry.mode == MODE_ALL:
        return [f"URL: {base}{folder.name} -> Folder: {folder.path}"
                for folder in registry.entries.values()]
    return [f"URL: {base}{video.path} -> File: {video.file_path}"
            for video in registry.videos()]
