"""Implementations of the relink CLI commands."""
