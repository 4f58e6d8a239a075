"""
Services for the compliance workflow orchestrator.

This module contains:
- Collaborator interfaces (specialist checkers, supervisor) and the checker registry
- The orchestration service (single, batch and health entry points)
"""

from compliance_orchestrator.services.checkers import CheckerRegistry, SpecialistChecker, Supervisor

__all__ = ["CheckerRegistry", "SpecialistChecker", "Supervisor"]
