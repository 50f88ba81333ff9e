"""Share local directories or videos over HTTP on the LAN."""

__version__ = "0.1.0"
