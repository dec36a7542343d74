"""
Verification errors.

Raised inside the verification service and converted to a
VerificationFailure before leaving it.
"""

from app.models.verification import FailureKind, VerificationFailure

# NotFound and ExpiredRequest share this so callers can't probe for request ids
EXPIRED_OR_UNKNOWN_MESSAGE = "This verification link is invalid or has expired. Please request a new one."


class VerificationError(Exception):
    kind: FailureKind = None
    default_message = "Verification failed"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_failure(self) -> VerificationFailure:
        return VerificationFailure(kind=self.kind, message=self.message)


class InvalidFormat(VerificationError):
    kind = FailureKind.invalid_format
    default_message = "Invalid input"


class RejectedConsumerDomain(VerificationError):
    kind = FailureKind.rejected_consumer_domain
    default_message = "Please use a company email address (not Gmail, Yahoo, etc.)"


class ExpiredRequest(VerificationError):
    kind = FailureKind.expired_request
    default_message = EXPIRED_OR_UNKNOWN_MESSAGE


class TokenMismatch(VerificationError):
    kind = FailureKind.token_mismatch
    default_message = "Invalid verification token"


class NotFound(VerificationError):
    kind = FailureKind.not_found
    default_message = EXPIRED_OR_UNKNOWN_MESSAGE
