"""A side-scrolling platform brawler with gates, enemies, a pygame window and SQLite saves."""

__version__ = "0.1.0"
__all__ = ["__version__"]