"""MCP server that reverse engineers APKs with jadx and apktool."""

from .utils.env import load_env

# Ensure environment defaults from `.env` are available to all modules on import.
load_env()

__version__ = "1.0.0"
