"""Package provenance matching for release uploads."""
