"""Command-line interface for protoc-fetcher."""

from .parser import CLI, main

__all__ = ["CLI", "main"]
