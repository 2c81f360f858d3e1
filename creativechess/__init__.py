"""Creative Chess: standard chess that turns into a game of one-shot actions."""

__version__ = "0.1.0"
