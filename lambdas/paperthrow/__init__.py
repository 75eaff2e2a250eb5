"""Session and event tracking backend for PaperThrow."""

__version__ = "0.1.0"
