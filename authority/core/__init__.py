"""Core package: configuration, result types, errors and composition root."""
