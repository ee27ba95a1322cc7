"""
atlast - Texture atlas builder

Packs a directory of images into a single RGBA atlas plus a binary table of
normalized texture coordinates, bundled into one archive.
"""

__version__ = "1.0.0"
__author__ = "atlast Team"
