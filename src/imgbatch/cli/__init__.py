"""
imgbatch Command-Line Interface

Typer-based CLI with Rich output for converting and inspecting images.
"""

from imgbatch import __version__

__all__ = ['__version__']
