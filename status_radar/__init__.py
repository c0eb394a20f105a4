"""Status radar: polls third-party status pages through relay chains."""

__version__ = "0.1.0"
