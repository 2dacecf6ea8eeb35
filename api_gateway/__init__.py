"""API gateway service package."""
