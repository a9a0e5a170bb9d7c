"""
Package entry point.

Allows running the converter via:

    python -m orgtree --input events.csv --output tree.json

This simply forwards execution to orgtree.cli.main().
"""

from orgtree.cli import main

if __name__ == "__main__":
    main()
