"""
Custom exception classes for the compliance workflow.

Defines specific error types for different failure scenarios.
"""


class ComplianceWorkflowError(Exception):
    """Base exception for all compliance workflow errors."""

    pass


class TransactionValidationError(ComplianceWorkflowError):
    """Raised when a transaction payload fails structural validation."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "Transaction validation failed")


class CheckerRegistryError(ComplianceWorkflowError):
    """Raised when the checker mapping does not cover every check kind."""

    pass


class DispatchError(ComplianceWorkflowError):
    """Raised when the dispatcher itself cannot run the selected checks."""

    pass


class SupervisorReviewError(ComplianceWorkflowError):
    """Raised when supervisor arbitration fails or returns an unusable decision."""

    pass
