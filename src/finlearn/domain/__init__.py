"""Domain-level abstractions."""
