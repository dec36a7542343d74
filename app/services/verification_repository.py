"""
Verification Repository - persistence for accounts and verification requests.

Each public method is ONE transaction (one get_db_session block).
State changes are conditional updates gated on the current status, so two
concurrent callers can never both win the same transition:

    UPDATE verification_requests SET status = 'completed'
    WHERE request_id = :id AND status = 'pending' AND expires_at >= :now

rowcount == 1 -> we won, rowcount == 0 -> somebody else already moved it.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import and_, insert, select, update

from app.db.postgres import get_db_session
from app.db.schema import users, verification_requests
from app.models.verification import (
    Account,
    AccountType,
    VerificationRequest,
    VerificationStatus,
)


def _row_to_account(row) -> Account:
    return Account(
        account_id=row.user_id,
        email=row.email,
        account_type=AccountType(row.account_type),
        company_name=row.company_name,
        company_email_verified=bool(row.company_email_verified),
    )


def _row_to_request(row) -> VerificationRequest:
    return VerificationRequest(
        request_id=row.request_id,
        account_id=row.account_id,
        candidate_email=row.candidate_email,
        candidate_company_name=row.candidate_company_name,
        candidate_website=row.candidate_website,
        derived_company_name=row.derived_company_name,
        status=VerificationStatus(row.status),
        created_at=row.created_at,
        expires_at=row.expires_at,
        completed_at=row.completed_at,
    )


class VerificationRepository:
    """SQL access for the verification workflow."""

    # ============================================================
    # ACCOUNTS
    # ============================================================

    def create_account(self, email: str, password_hash: str, now: datetime) -> int:
        """Insert a JobSeeker account and return its id."""
        with get_db_session() as db:
            result = db.execute(
                insert(users).values(
                    email=email,
                    password_hash=password_hash,
                    account_type=AccountType.job_seeker.value,
                    company_name=None,
                    company_email_verified=False,
                    is_active=True,
                    created_at=now,
                )
            )
            return result.inserted_primary_key[0]

    def get_account(self, account_id: int) -> Optional[Account]:
        with get_db_session() as db:
            row = db.execute(select(users).where(users.c.user_id == account_id)).fetchone()
        return _row_to_account(row) if row else None

    def get_user_row(self, email: str):
        """Raw users row (includes password_hash) for login."""
        with get_db_session() as db:
            return db.execute(select(users).where(users.c.email == email)).fetchone()

    def get_user_row_by_id(self, account_id: int):
        with get_db_session() as db:
            return db.execute(select(users).where(users.c.user_id == account_id)).fetchone()

    # ============================================================
    # VERIFICATION REQUESTS
    # ============================================================

    def create_request(self, request: VerificationRequest, token_hash: str) -> Optional[int]:
        """
        Store a new Pending request and expire every other Pending request
        of the same account, atomically.

        The account row is locked first (SELECT ... FOR UPDATE) so two
        concurrent submits for one account serialize here and at most one
        Pending request survives. The verified flag is re-read under that
        lock: a completion that landed after the caller's own check wins.

        Returns number of superseded requests, or None (nothing stored)
        when the account is already a verified recruiter.
        Raises LookupError when the account does not exist.
        """
        with get_db_session() as db:
            account = db.execute(
                select(users.c.user_id, users.c.company_email_verified)
                .where(users.c.user_id == request.account_id)
                .with_for_update()
            ).fetchone()
            if account is None:
                raise LookupError(f"Account {request.account_id} not found")
            if account.company_email_verified:
                return None

            db.execute(
                insert(verification_requests).values(
                    request_id=request.request_id,
                    account_id=request.account_id,
                    candidate_email=request.candidate_email,
                    candidate_company_name=request.candidate_company_name,
                    candidate_website=request.candidate_website,
                    derived_company_name=request.derived_company_name,
                    token_hash=token_hash,
                    status=VerificationStatus.pending.value,
                    created_at=request.created_at,
                    expires_at=request.expires_at,
                )
            )

            result = db.execute(
                update(verification_requests)
                .where(and_(
                    verification_requests.c.account_id == request.account_id,
                    verification_requests.c.status == VerificationStatus.pending.value,
                    verification_requests.c.request_id != request.request_id,
                ))
                .values(status=VerificationStatus.expired.value)
            )
            return result.rowcount

    def get_request(self, request_id: str):
        """Returns (VerificationRequest, token_hash) or None."""
        with get_db_session() as db:
            row = db.execute(
                select(verification_requests).where(verification_requests.c.request_id == request_id)
            ).fetchone()
        if not row:
            return None
        return _row_to_request(row), row.token_hash

    def get_pending_for_account(self, account_id: int, now: datetime) -> Optional[VerificationRequest]:
        """The live Pending request of an account (not past expires_at), if any."""
        with get_db_session() as db:
            row = db.execute(
                select(verification_requests)
                .where(and_(
                    verification_requests.c.account_id == account_id,
                    verification_requests.c.status == VerificationStatus.pending.value,
                    verification_requests.c.expires_at >= now,
                ))
                .order_by(verification_requests.c.created_at.desc())
            ).fetchone()
        return _row_to_request(row) if row else None

    def list_requests_for_account(self, account_id: int) -> List[VerificationRequest]:
        with get_db_session() as db:
            rows = db.execute(
                select(verification_requests)
                .where(verification_requests.c.account_id == account_id)
                .order_by(verification_requests.c.created_at)
            ).fetchall()
        return [_row_to_request(row) for row in rows]

    def complete_request(self, request_id: str, account_id: int, company_name: str, now: datetime) -> bool:
        """
        Pending -> Completed and promote the account to Recruiter, in one
        transaction. Returns False (and changes nothing) if the request was
        no longer Pending, already past expires_at, or the account is
        already verified (a promotion is never applied twice).
        Raises LookupError when the account does not exist.
        """
        with get_db_session() as db:
            account = db.execute(
                select(users.c.user_id, users.c.company_email_verified)
                .where(users.c.user_id == account_id)
                .with_for_update()
            ).fetchone()
            if account is None:
                raise LookupError(f"Account {account_id} not found")
            if account.company_email_verified:
                return False

            result = db.execute(
                update(verification_requests)
                .where(and_(
                    verification_requests.c.request_id == request_id,
                    verification_requests.c.status == VerificationStatus.pending.value,
                    verification_requests.c.expires_at >= now,
                ))
                .values(status=VerificationStatus.completed.value, completed_at=now)
            )
            if result.rowcount != 1:
                return False

            promoted = db.execute(
                update(users)
                .where(and_(
                    users.c.user_id == account_id,
                    users.c.company_email_verified.is_(False),
                ))
                .values(
                    account_type=AccountType.recruiter.value,
                    company_name=company_name,
                    company_email_verified=True,
                )
            )
            if promoted.rowcount != 1:
                # roll back the status change too
                raise LookupError(f"Account {account_id} not found")
            return True

    def expire_request(self, request_id: str) -> bool:
        """Pending -> Expired for a single request."""
        with get_db_session() as db:
            result = db.execute(
                update(verification_requests)
                .where(and_(
                    verification_requests.c.request_id == request_id,
                    verification_requests.c.status == VerificationStatus.pending.value,
                ))
                .values(status=VerificationStatus.expired.value)
            )
            return result.rowcount == 1

    def expire_stale(self, now: datetime) -> int:
        """Pending requests with expires_at < now -> Expired. Returns count."""
        with get_db_session() as db:
            result = db.execute(
                update(verification_requests)
                .where(and_(
                    verification_requests.c.status == VerificationStatus.pending.value,
                    verification_requests.c.expires_at < now,
                ))
                .values(status=VerificationStatus.expired.value)
            )
            return result.rowcount
