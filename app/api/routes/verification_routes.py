"""
Company Email Verification Routes

POST /auth/verify-company-email - Start verification (sends email)
POST /auth/verify-company-email/confirm - Finish verification with token
GET /auth/verify-company-email/confirm - Same, for the link in the email
GET /user/company-verification-status - Current recruiter/verification state
"""

from fastapi import APIRouter, HTTPException, Depends, Query
from fastapi.responses import JSONResponse

from app.core.auth import get_current_user
from app.models.verification import FailureKind, VerificationFailure
from app.services.verification_service import VerificationService, get_verification_service
from app.schemas.schemas import (
    CompanyVerificationSubmit, CompanyVerificationSubmitResponse,
    CompanyVerificationConfirm, CompanyVerificationConfirmResponse,
    CompanyVerificationStatusResponse, PendingVerificationResponse, ErrorResponse,
)

# Plain `def` handlers: submit blocks on SMTP, so FastAPI runs them in its threadpool
router = APIRouter(tags=["Company Verification"])

# ExpiredRequest and NotFound both map to 410 with the same message
FAILURE_STATUS = {
    FailureKind.invalid_format: 422,
    FailureKind.rejected_consumer_domain: 400,
    FailureKind.expired_request: 410,
    FailureKind.not_found: 410,
    FailureKind.token_mismatch: 400,
}


def failure_response(failure: VerificationFailure) -> JSONResponse:
    """Top-level {message, kind} body, as the web client reads error.message."""
    kind = FailureKind.expired_request if failure.kind == FailureKind.not_found else failure.kind
    body = ErrorResponse(message=failure.message, kind=kind.value)
    return JSONResponse(status_code=FAILURE_STATUS[failure.kind], content=body.model_dump())


FAILURE_RESPONSES = {
    400: {"model": ErrorResponse},
    410: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
}


def _confirm(service: VerificationService, request_id: str, token: str):
    result = service.complete_challenge(request_id, token)
    if isinstance(result, VerificationFailure):
        return failure_response(result)
    return CompanyVerificationConfirmResponse(account_id=result.account_id, company_name=result.company_name)


@router.post("/auth/verify-company-email", response_model=CompanyVerificationSubmitResponse, responses=FAILURE_RESPONSES)
def submit_company_email(
    data: CompanyVerificationSubmit,
    user: dict = Depends(get_current_user),
    service: VerificationService = Depends(get_verification_service),
):
    """
    Send a verification email to a company address.

    Consumer addresses (Gmail, Yahoo, ...) are rejected. Submitting again
    replaces the previous pending request and resends the email.
    """
    result = service.submit(user["user_id"], data.company_email, data.company_name, data.company_website)
    if isinstance(result, VerificationFailure):
        return failure_response(result)

    return CompanyVerificationSubmitResponse(
        request_id=result.request_id,
        message=result.message,
        derived_company_name=result.derived_company_name,
        delivery_warning=result.delivery_warning,
        already_verified=result.already_verified,
    )


@router.post("/auth/verify-company-email/confirm", response_model=CompanyVerificationConfirmResponse, responses=FAILURE_RESPONSES)
def confirm_company_email(
    data: CompanyVerificationConfirm,
    service: VerificationService = Depends(get_verification_service),
):
    """Complete verification with the token from the email."""
    return _confirm(service, data.request_id, data.token)


@router.get("/auth/verify-company-email/confirm", response_model=CompanyVerificationConfirmResponse, responses=FAILURE_RESPONSES)
def confirm_company_email_link(
    request_id: str = Query(...),
    token: str = Query(...),
    service: VerificationService = Depends(get_verification_service),
):
    """Link target used in the verification email."""
    return _confirm(service, request_id, token)


@router.get("/user/company-verification-status", response_model=CompanyVerificationStatusResponse)
def company_verification_status(
    user: dict = Depends(get_current_user),
    service: VerificationService = Depends(get_verification_service),
):
    """Recruiter status of the current user, plus any pending request."""
    status_view = service.get_status(user["user_id"])
    if isinstance(status_view, VerificationFailure):
        raise HTTPException(status_code=404, detail="Account not found")

    pending = status_view.pending_request
    return CompanyVerificationStatusResponse(
        account_id=status_view.account_id,
        user_type=status_view.account_type.value,
        company_name=status_view.company_name,
        company_email_verified=status_view.company_email_verified,
        pending_request=PendingVerificationResponse(
            request_id=pending.request_id,
            candidate_email=pending.candidate_email,
            candidate_company_name=pending.candidate_company_name,
            expires_at=pending.expires_at,
        ) if pending else None,
    )
