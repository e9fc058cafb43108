"""Exceptions for agent component handling.

Extraction, directive rewriting and dispatch never raise for message content;
these exceptions only cover setup problems such as invalid configuration.
"""


class AgentComponentsError(Exception):
    """Base exception for agent component errors."""


class ConfigurationError(AgentComponentsError, ValueError):
    """Raised when configuration values fail validation."""
