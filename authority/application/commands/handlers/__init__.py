"""Command handlers, one per write use case."""
