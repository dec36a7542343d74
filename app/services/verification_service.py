"""
Company Email Verification Service

PURPOSE:
Promote a JobSeeker account to Recruiter once the user proves they control
a company email address.

HOW IT WORKS:
1. submit()            - validate input, classify the email domain, store a
                         Pending request (superseding any older one) and
                         email a single-use token to the address
2. complete_challenge() - check the token, then mark the request Completed
                         and promote the account in ONE transaction
3. reconcile_expired() - maintenance sweep, Pending past expires_at -> Expired

State machine per request:
    (none) -> pending -> completed
                      -> expired

Public methods never raise for domain failures; they return a
VerificationFailure with a FailureKind instead.
"""

import hashlib
import hmac
import secrets
import uuid
from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional, Union
from urllib.parse import urlencode

from pydantic import HttpUrl, TypeAdapter, ValidationError

from app.core.config import get_settings
from app.core.exceptions import (
    ExpiredRequest,
    InvalidFormat,
    NotFound,
    RejectedConsumerDomain,
    TokenMismatch,
    VerificationError,
)
from app.core.logger import log_debug, log_info, log_success, log_warning
from app.models.verification import (
    ChallengeResult,
    CompanyNamePolicy,
    PendingRequestInfo,
    SubmitResult,
    VerificationFailure,
    VerificationRequest,
    VerificationStatus,
    VerificationStatusView,
)
from app.services.domain_classifier import DomainClassifier, split_email
from app.services.mail_dispatcher import (
    COMPANY_EMAIL_VERIFICATION,
    MessageDispatcher,
    get_smtp_dispatcher,
)
from app.services.verification_repository import VerificationRepository

DEFAULT_TTL = timedelta(hours=24)

_http_url = TypeAdapter(HttpUrl)


# ============================================================
# HELPERS
# ============================================================

class SystemClock:
    """Naive UTC wall clock (matches how timestamps are stored)."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc).replace(tzinfo=None)


def generate_token() -> str:
    return secrets.token_urlsafe(32)


def hash_token(token: str) -> str:
    """Only the SHA-256 of a token is stored."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def tokens_match(presented: str, stored_hash: str) -> bool:
    """Constant-time comparison of a presented token with the stored hash."""
    if not isinstance(presented, str) or not presented:
        return False
    return hmac.compare_digest(hash_token(presented), stored_hash)


def validate_website(website: Optional[str]) -> Optional[str]:
    """Empty -> None; otherwise must be an http(s) URL with a host."""
    if website is None or not website.strip():
        return None
    website = website.strip()
    try:
        _http_url.validate_python(website)
    except ValidationError:
        raise InvalidFormat("Company website must be a valid http(s) URL")
    return website


# ============================================================
# SERVICE
# ============================================================

class VerificationService:
    """
    Orchestrates company-email verification.

    Args:
        repository: persistence for accounts and requests
        dispatcher: sends the verification email
        blocked_domains: consumer email domains to reject
        clock: object with now() -> naive UTC datetime
        ttl: lifetime of a Pending request
        company_name_policy: which name the account gets on promotion
        base_url: public URL used to build the confirmation link
    """

    def __init__(
        self,
        repository: VerificationRepository,
        dispatcher: MessageDispatcher,
        blocked_domains: Iterable[str],
        clock=None,
        ttl: timedelta = DEFAULT_TTL,
        company_name_policy: CompanyNamePolicy = CompanyNamePolicy.declared,
        base_url: str = "http://localhost:8000",
    ):
        self.repository = repository
        self.dispatcher = dispatcher
        self.classifier = DomainClassifier(blocked_domains)
        self.clock = clock or SystemClock()
        self.ttl = ttl
        self.company_name_policy = CompanyNamePolicy(company_name_policy)
        self.base_url = base_url.rstrip("/")

    # --------------------------------------------------------
    # submit
    # --------------------------------------------------------

    def submit(
        self,
        account_id: int,
        company_email: str,
        company_name: str,
        company_website: Optional[str] = None,
    ) -> Union[SubmitResult, VerificationFailure]:
        """
        Start (or restart) verification for an account.

        Returns SubmitResult on success, VerificationFailure with kind
        InvalidFormat / RejectedConsumerDomain / NotFound otherwise.
        """
        try:
            return self._submit(account_id, company_email, company_name, company_website)
        except VerificationError as e:
            return e.to_failure()

    def _submit(self, account_id, company_email, company_name, company_website) -> SubmitResult:
        if not company_email or not company_email.strip():
            raise InvalidFormat("Company email is required")
        if not company_name or not company_name.strip():
            raise InvalidFormat("Company name is required")
        company_name = company_name.strip()
        website = validate_website(company_website)

        # Step 1: classify
        classification = self.classifier.classify(company_email)
        if not classification.is_company_domain:
            log_info(f"Rejected consumer email domain for account {account_id}")
            raise RejectedConsumerDomain()

        account = self.repository.get_account(account_id)
        if account is None:
            raise NotFound("Account not found")

        # Step 2: already verified -> no-op
        if account.is_verified_recruiter:
            return self._already_verified(account_id)

        # Steps 3 + 4: supersede old Pending, store new one (one transaction)
        local, domain = split_email(company_email)
        email = f"{local}@{domain}"
        now = self.clock.now()
        token = generate_token()
        request = VerificationRequest(
            request_id=uuid.uuid4().hex,
            account_id=account_id,
            candidate_email=email,
            candidate_company_name=company_name,
            candidate_website=website,
            derived_company_name=classification.derived_company_name,
            status=VerificationStatus.pending,
            created_at=now,
            expires_at=now + self.ttl,
        )
        try:
            superseded = self.repository.create_request(request, hash_token(token))
        except LookupError:
            raise NotFound("Account not found")
        if superseded is None:
            # promoted between the check above and the insert
            return self._already_verified(account_id)
        log_info(
            f"Verification request {request.request_id} created for account {account_id} "
            f"({domain}), superseded {superseded}"
        )

        # Step 5: send email outside the transaction; failure is only a warning
        delivery = self.dispatcher.send(
            email,
            COMPANY_EMAIL_VERIFICATION,
            self._message_payload(request, token),
        )

        result = SubmitResult(
            request_id=request.request_id,
            message=f"Verification email sent to {email}. Check your inbox to complete verification.",
            derived_company_name=classification.derived_company_name,
        )
        if not delivery.delivered:
            log_warning(f"Delivery failed for request {request.request_id}: {delivery.error}")
            result.message = f"Verification request created for {email}."
            result.delivery_warning = (
                f"We could not deliver the verification email ({delivery.error}). "
                f"Submit again to resend."
            )
        return result

    def _already_verified(self, account_id: int) -> SubmitResult:
        log_debug(f"Account {account_id} already verified, skipping")
        return SubmitResult(
            message="Your company email is already verified.",
            already_verified=True,
        )

    def _message_payload(self, request: VerificationRequest, token: str) -> dict:
        query = urlencode({"request_id": request.request_id, "token": token})
        return {
            "request_id": request.request_id,
            "token": token,
            "company_name": request.candidate_company_name,
            "confirm_url": f"{self.base_url}/api/auth/verify-company-email/confirm?{query}",
            "expires_at": request.expires_at.strftime("%Y-%m-%d %H:%M"),
        }

    # --------------------------------------------------------
    # complete_challenge
    # --------------------------------------------------------

    def complete_challenge(
        self, request_id: str, presented_token: str
    ) -> Union[ChallengeResult, VerificationFailure]:
        """
        Finish verification with the emailed token.

        Returns ChallengeResult on success, VerificationFailure with kind
        ExpiredRequest / TokenMismatch / NotFound otherwise.
        """
        try:
            return self._complete_challenge(request_id, presented_token)
        except VerificationError as e:
            return e.to_failure()

    def _complete_challenge(self, request_id: str, presented_token: str) -> ChallengeResult:
        found = self.repository.get_request(request_id) if request_id else None
        if found is None:
            raise NotFound()
        request, token_hash = found

        now = self.clock.now()
        if request.status != VerificationStatus.pending:
            raise ExpiredRequest()
        if request.is_expired_at(now):
            self.repository.expire_request(request_id)
            raise ExpiredRequest()

        if not tokens_match(presented_token, token_hash):
            log_warning(f"Token mismatch for request {request_id}")
            raise TokenMismatch()

        company_name = self._resolve_company_name(request)
        try:
            completed = self.repository.complete_request(request_id, request.account_id, company_name, now)
        except LookupError:
            raise NotFound()
        if not completed:
            # lost the race, or it was superseded/expired in the meantime
            raise ExpiredRequest()

        log_success(f"Account {request.account_id} promoted to recruiter ({company_name})")
        return ChallengeResult(account_id=request.account_id, company_name=company_name)

    def _resolve_company_name(self, request: VerificationRequest) -> str:
        if self.company_name_policy == CompanyNamePolicy.derived:
            return request.derived_company_name
        return request.candidate_company_name

    # --------------------------------------------------------
    # reconcile_expired / status
    # --------------------------------------------------------

    def reconcile_expired(self) -> int:
        """Expire every Pending request past expires_at. Returns count."""
        count = self.repository.expire_stale(self.clock.now())
        log_info(f"Expired {count} stale verification request(s)")
        return count

    def get_status(self, account_id: int) -> Union[VerificationStatusView, VerificationFailure]:
        account = self.repository.get_account(account_id)
        if account is None:
            return NotFound("Account not found").to_failure()

        pending = self.repository.get_pending_for_account(account_id, self.clock.now())
        return VerificationStatusView(
            account_id=account.account_id,
            account_type=account.account_type,
            company_name=account.company_name,
            company_email_verified=account.company_email_verified,
            pending_request=PendingRequestInfo(
                request_id=pending.request_id,
                candidate_email=pending.candidate_email,
                candidate_company_name=pending.candidate_company_name,
                expires_at=pending.expires_at,
            ) if pending else None,
        )


# Singleton instance
_verification_service: VerificationService = None


def get_verification_service() -> VerificationService:
    """Get or create the verification service from settings (singleton pattern)"""
    global _verification_service
    if _verification_service is None:
        settings = get_settings()
        _verification_service = VerificationService(
            repository=VerificationRepository(),
            dispatcher=get_smtp_dispatcher(),
            blocked_domains=settings.blocked_domains,
            ttl=timedelta(hours=settings.verification_ttl_hours),
            company_name_policy=settings.company_name_policy,
            base_url=settings.app_base_url,
        )
    return _verification_service


def set_verification_service(service: Optional[VerificationService]) -> None:
    """Swap the singleton (tests, or a custom dispatcher)."""
    global _verification_service
    _verification_service = service
