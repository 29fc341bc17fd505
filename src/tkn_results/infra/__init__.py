"""Infrastructure adapters: Results API transports and cluster lookups."""
