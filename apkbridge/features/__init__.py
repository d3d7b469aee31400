"""Tool features: extraction, search and file reads."""
