"""Infrastructure adapters: persistence, identity provider, storage."""
