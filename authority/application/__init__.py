"""Application layer: ledgers, registries and use-case handlers."""
