"""gitflow - branch, sync, cleanup and release workflows for a single git repository."""

__version__ = "0.1.0"
