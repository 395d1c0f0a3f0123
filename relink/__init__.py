"""relink - replace published-artifact dependencies with workspace siblings."""

__version__ = "0.1.0"
