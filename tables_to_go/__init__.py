"""tables-to-go: generate Go structs from database tables."""

__version__ = "0.3.0"
