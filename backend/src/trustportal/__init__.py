"""Trust Portal backend - inbound communication safety and ticket threading."""

__version__ = "0.1.0"
