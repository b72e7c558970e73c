"""Portal: role-based educational resource service."""
