"""Turn-based standup orchestration for team chat."""

__version__ = "0.1.0"
