"""JSON Schema documents for tool arguments."""
