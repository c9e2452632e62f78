"""Job handlers keyed by job type."""
