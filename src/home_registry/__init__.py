"""Home registry: rooms and devices served over a line-based protocol."""

__version__ = "0.3.0"
