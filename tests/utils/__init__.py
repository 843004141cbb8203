"""Test utilities for protoc-fetcher."""
