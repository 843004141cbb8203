"""
Entry point for running protoc-fetcher as a module.

Usage: python -m protoc_fetcher [command] [options]
"""

from protoc_fetcher.cli.parser import main

if __name__ == "__main__":
    main()
