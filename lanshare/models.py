from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Tuple, Union

MODE_ALL = "all"
MODE_VIDEOS = "videos"
MODES = (MODE_ALL, MODE_VIDEOS)


class ConfigError(Exception):
    """Fatal startup problem: nothing gets served"""


@dataclass(frozen=True)
class Folder:
    name: str   # URL prefix, e.g. "/dir1/"
    path: str   # absolute filesystem path


@dataclass(frozen=True)
class Video:
    name: str        # file name shown to the user
    path: str        # alias URL, e.g. "/dir1/video3"
    file_path: str   # absolute filesystem path

    def public(self):
        return {"name": self.name, "path": self.path}


Entry = Union[Folder, Tuple[Video, ...]]


@dataclass(frozen=True)
class Registry:
    """Read-only table of URL prefix -> Folder (all mode) or videos (videos mode)"""
    mode: str
    entries: Mapping[str, Entry] = field(default_factory=dict)

    def __post_init__(self):
        # freeze whatever mapping we were handed; callers keep no write handle
        object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    def prefixes(self):
        return list(self.entries)

    def videos(self):
        """All videos across every prefix, in registry order"""
        if self.mode != MODE_VIDEOS:
            return []
        return [video for videos in self.entries.values() for video in videos]
