"""Trip recording and driving report aggregation."""

__version__ = "0.1.0"
