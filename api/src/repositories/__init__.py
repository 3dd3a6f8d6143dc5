"""Data access for the seed tables."""
