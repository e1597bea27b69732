"""Translation management server for per-language JSON locale files."""

__version__ = "1.0.0"
