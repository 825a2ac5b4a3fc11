"""
Entry point for running the datoria launcher as a module.

Usage: python -m datoria_launcher [datoria arguments]
"""

from datoria_launcher.cli.main import main

if __name__ == "__main__":
    main()
