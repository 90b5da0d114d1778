"""Infrastructure adapters (persistence, email, OAuth)."""
