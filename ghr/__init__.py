"""ghr - create or update a GitHub release and attach build outputs to it."""

__version__ = "0.3.0"
