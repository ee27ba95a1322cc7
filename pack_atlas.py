#!/usr/bin/env python3
"""
atlast - pack a directory of PNG images into a texture atlas archive.

    python pack_atlas.py build -d sprites/ -o sprites.atlas
    python pack_atlas.py inspect sprites.atlas
"""

from atlast.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
