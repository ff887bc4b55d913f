"""
Entry point for running getgo as a module.

Usage: python -m getgo [command] [options]
"""

from getgo.cli.parser import main

if __name__ == "__main__":
    main()
