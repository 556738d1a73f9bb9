"""Remote terminal multiplexer: a session shell server and a tiled curses client."""

__version__ = "0.1.0"