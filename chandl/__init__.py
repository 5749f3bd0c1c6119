"""chandl - imageboard thread image downloader."""

__version__ = '0.1.0'
