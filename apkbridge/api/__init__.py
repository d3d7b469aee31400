"""MCP tool surface: contracts, envelopes and dispatch."""
