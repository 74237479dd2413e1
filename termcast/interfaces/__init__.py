"""Structural protocols for mutable sources, operations and environment hooks."""
