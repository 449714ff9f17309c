"""Infrastructure adapters (persistence, read models, events, logging)."""
