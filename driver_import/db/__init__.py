"""Driver store implementations."""
