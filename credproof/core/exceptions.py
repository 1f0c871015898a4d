"""
credproof Exception Hierarchy

All exceptions inherit from CredProofError for easy catching.

Decoding and validation report failure as values (None, an invalid
ValidationResult). These exceptions are raised only by the strict
reference parser, policy loading, and the verification service.
"""


class CredProofError(Exception):
    """Base exception for all credproof errors"""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class PolicyError(CredProofError):
    """Raised when a policy definition cannot be loaded"""
    pass


class MalformedReferenceError(CredProofError):
    """Raised by the strict parser when a proof reference cannot be decoded"""
    pass


class ProofNotFoundError(CredProofError):
    """Raised when a reference resolves neither from the store nor by decoding"""
    pass


class ConsentRequiredError(CredProofError):
    """Raised when verification is requested without the subject's consent"""
    pass
