"""
imgbatch - batch image format converter

Converts PNG, JPEG and WEBP images, given loose or inside ZIP archives,
and packs the results into a single downloadable archive.
"""

__version__ = "0.1.0"
