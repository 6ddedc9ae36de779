"""Admin aggregation."""
