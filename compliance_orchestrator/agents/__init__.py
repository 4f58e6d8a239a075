"""
LangGraph agents for the compliance workflow orchestrator.

This module contains the transaction compliance workflow:
validation, parallel checks, risk routing, supervisor review and reporting.
"""

__all__ = []
