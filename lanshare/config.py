import argparse
import os
from dataclasses import dataclass
from typing import Tuple

from .build import DEFAULT_VIDEO_EXTENSIONS, merge_extensions
from .models import MODE_ALL, MODE_VIDEOS, ConfigError

DEFAULT_PORT = 8080
DEFAULT_DIRECTORIES = (".",)

# Environment variables act as prompt defaults
ENV_PORT = "LANSHARE_PORT"
ENV_DIRS = "LANSHARE_DIRS"
ENV_MODE = "LANSHARE_MODE"
ENV_EXTENSIONS = "LANSHARE_EXTENSIONS"


@dataclass(frozen=True)
class Settings:
    port: int = DEFAULT_PORT
    directories: Tuple[str, ...] = DEFAULT_DIRECTORIES
    mode: str = MODE_ALL
    extensions: Tuple[str, ...] = DEFAULT_VIDEO_EXTENSIONS
    debug: bool = False


def split_list(text):
    """Split a comma-separated answer into stripped, non-empty items"""
    return [item.strip() for item in (text or "").split(",") if item.strip()]


def split_directories(text):
    """
    Directories from a comma-separated answer, keeping their positions.

    A blank item stands for the current directory so that later
    directories keep the /dir<N>/ number their position implies.
    """
    if not (text or "").strip():
        return DEFAULT_DIRECTORIES
    return tuple(item.strip() or "." for item in text.split(","))


def parse_port(text):
    text = (text or "").strip()
    if not text:
        return DEFAULT_PORT
    try:
        port = int(text)
    except ValueError:
        raise ConfigError(f"Port {text} NOT valid")
    if not 0 < port < 65536:
        raise ConfigError(f"Port {port} out of range")
    return port


def parse_mode(text):
    mode = (text or "").strip().lower()
    if mode == "":
        return MODE_ALL
    if mode not in (MODE_ALL, MODE_VIDEOS):
        raise ConfigError(f"Option {mode} NOT valid")
    return mode


def build_parser():
    parser = argparse.ArgumentParser(
        prog="lanshare",
        description="Share local directories or videos over HTTP on the LAN.",
    )
    parser.add_argument("-p", "--port", help=f"port to listen on (default {DEFAULT_PORT})")
    parser.add_argument("-d", "--dirs", help="comma-separated directories to serve (default: current directory)")
    parser.add_argument("-m", "--mode", help="'all' (default) or 'videos'")
    parser.add_argument("-e", "--ext", help="extra comma-separated video extensions (videos mode)")
    parser.add_argument("--no-input", action="store_true", help="never prompt, use defaults for anything not given")
    parser.add_argument("--debug", action="store_true", help="verbose logging")
    return parser


def load_settings(argv=None, environ=None, prompt=input):
    """
    Collect startup settings.

    Each value comes from its command line flag when given, otherwise
    from an interactive prompt whose empty answer falls back to the
    environment and then to the built-in default. Raises ConfigError on
    an invalid port or mode.
    """
    args = build_parser().parse_args(argv)
    environ = os.environ if environ is None else environ

    def ask(flag_value, question, env_name):
        if flag_value is not None:
            return flag_value
        answer = "" if args.no_input else prompt(question).strip()
        return answer or environ.get(env_name, "")

    port = parse_port(ask(args.port, f"Enter the port to listen on (or press Enter for {DEFAULT_PORT}): ", ENV_PORT))

    dirs_input = ask(args.dirs, "Enter directories to serve (comma-separated, or press Enter for current directory): ",
                     ENV_DIRS)
    directories = split_directories(dirs_input)

    mode = parse_mode(ask(args.mode, "Select option (videos/all or press enter for all): ", ENV_MODE))

    extensions = DEFAULT_VIDEO_EXTENSIONS
    if mode == MODE_VIDEOS:
        ext_input = ask(args.ext, "Enter additional file extensions to serve (comma-separated, or press Enter for default): ",
                        ENV_EXTENSIONS)
        extensions = merge_extensions(split_list(ext_input))

    return Settings(port=port, directories=directories, mode=mode, extensions=extensions, debug=args.debug)
