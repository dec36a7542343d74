"""
Models module - internal data structures for the verification workflow.
"""
from app.models.verification import (
    Account,
    AccountType,
    ChallengeResult,
    ClassificationResult,
    CompanyNamePolicy,
    DeliveryResult,
    FailureKind,
    PendingRequestInfo,
    RejectionReason,
    SubmitResult,
    VerificationFailure,
    VerificationRequest,
    VerificationStatus,
    VerificationStatusView,
)

__all__ = [
    "Account",
    "AccountType",
    "ChallengeResult",
    "ClassificationResult",
    "CompanyNamePolicy",
    "DeliveryResult",
    "FailureKind",
    "PendingRequestInfo",
    "RejectionReason",
    "SubmitResult",
    "VerificationFailure",
    "VerificationRequest",
    "VerificationStatus",
    "VerificationStatusView",
]
