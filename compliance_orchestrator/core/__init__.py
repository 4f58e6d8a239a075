"""Configuration, observability and exceptions shared across the orchestrator."""
