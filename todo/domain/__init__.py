"""Domain entities and validation rules."""
