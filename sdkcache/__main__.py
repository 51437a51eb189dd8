"""
Entry point for running sdkcache as a module.

Usage: python -m sdkcache [command] [options]
"""

from sdkcache.cli.parser import main

if __name__ == "__main__":
    main()
