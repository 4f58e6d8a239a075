"""Compliance workflow state machine and its step functions."""

from compliance_orchestrator.agents.compliance_workflow.workflow_executor import (
    ComplianceWorkflow,
    create_compliance_workflow,
)

__all__ = ["ComplianceWorkflow", "create_compliance_workflow"]
