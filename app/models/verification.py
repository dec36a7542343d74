"""
Domain records for company-email verification.

Account and VerificationRequest mirror the `users` and
`verification_requests` tables. The *Result / Failure models are what
the verification service hands back to its caller (the HTTP layer).
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel


# ============================================================
# ENUMS
# ============================================================

class AccountType(str, Enum):
    job_seeker = "job_seeker"
    recruiter = "recruiter"


class VerificationStatus(str, Enum):
    pending = "pending"
    completed = "completed"
    expired = "expired"
    failed = "failed"


class RejectionReason(str, Enum):
    consumer_domain = "consumer_domain"


class FailureKind(str, Enum):
    invalid_format = "InvalidFormat"
    rejected_consumer_domain = "RejectedConsumerDomain"
    expired_request = "ExpiredRequest"
    token_mismatch = "TokenMismatch"
    not_found = "NotFound"


class CompanyNamePolicy(str, Enum):
    declared = "declared"
    derived = "derived"


# ============================================================
# RECORDS
# ============================================================

class Account(BaseModel):
    account_id: int
    email: str
    account_type: AccountType = AccountType.job_seeker
    company_name: Optional[str] = None
    company_email_verified: bool = False

    @property
    def is_verified_recruiter(self) -> bool:
        return self.account_type == AccountType.recruiter and self.company_email_verified


class VerificationRequest(BaseModel):
    request_id: str
    account_id: int
    candidate_email: str
    candidate_company_name: str
    candidate_website: Optional[str] = None
    derived_company_name: str
    status: VerificationStatus = VerificationStatus.pending
    created_at: datetime
    expires_at: datetime
    completed_at: Optional[datetime] = None

    def is_expired_at(self, now: datetime) -> bool:
        return now > self.expires_at


# ============================================================
# RESULTS
# ============================================================

class ClassificationResult(BaseModel):
    is_company_domain: bool
    derived_company_name: Optional[str] = None
    reason: Optional[RejectionReason] = None


class DeliveryResult(BaseModel):
    delivered: bool
    error: Optional[str] = None


class SubmitResult(BaseModel):
    request_id: Optional[str] = None
    message: str
    derived_company_name: Optional[str] = None
    delivery_warning: Optional[str] = None
    already_verified: bool = False


class ChallengeResult(BaseModel):
    account_id: int
    company_name: str


class PendingRequestInfo(BaseModel):
    request_id: str
    candidate_email: str
    candidate_company_name: str
    expires_at: datetime


class VerificationStatusView(BaseModel):
    account_id: int
    account_type: AccountType
    company_name: Optional[str] = None
    company_email_verified: bool = False
    pending_request: Optional[PendingRequestInfo] = None


class VerificationFailure(BaseModel):
    kind: FailureKind
    message: str
