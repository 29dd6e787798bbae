"""Storage and preference adapters."""
