"""A small wiki that keeps each page as a plain text file."""

__version__ = "0.1.0"
