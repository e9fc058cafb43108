"""Core data types for component extraction and dispatch."""
