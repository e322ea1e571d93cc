"""Shared utilities for the backend."""
from utils.names import join_full_name

__all__ = [
    "join_full_name",
]
