"""Vote and reputation engine for the ventboard discussion forum."""

__version__ = "0.1.0"
