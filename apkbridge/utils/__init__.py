"""Configuration, logging and error helpers."""
