"""Infrastructure adapters: persistence, security primitives, logging, email."""
