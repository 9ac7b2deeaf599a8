"""Infrastructure adapters for warden_identity (persistence, email)."""
