"""Import configuration."""
