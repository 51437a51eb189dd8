"""
Entry point for running the sdkcache CLI as a module.

Usage: python -m sdkcache.cli [command] [options]
"""

from .parser import main

if __name__ == "__main__":
    main()
