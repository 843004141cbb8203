"""
Entry point for running the protoc-fetcher CLI as a module.

Usage: python -m protoc_fetcher.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
