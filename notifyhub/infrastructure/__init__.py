"""Infrastructure adapters: persistence, security, email and channel providers."""
