"""Contract search service: advanced search, suggestions, saved searches and analytics."""

__version__ = "1.0.0"
