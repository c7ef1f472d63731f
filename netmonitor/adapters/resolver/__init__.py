"""Name resolution adapters."""
