"""Split large delimited files into fixed-size chunk files."""
__version__ = "0.1.0"
