"""
Authentication Routes

POST /auth/register - Register new job seeker account
POST /auth/login - Login and get JWT token
GET /auth/me - Get current user info
"""

from fastapi import APIRouter, HTTPException, Depends
from sqlalchemy.exc import IntegrityError

from app.core.auth import hash_password, verify_password, create_access_token, get_current_user
from app.services.verification_repository import VerificationRepository
from app.services.verification_service import SystemClock
from app.schemas.schemas import (
    RegisterRequest, LoginRequest, TokenResponse, UserResponse, MessageResponse
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=MessageResponse, status_code=201)
def register(request: RegisterRequest):
    """
    Register a new account. Every account starts as a job seeker;
    recruiter access comes from company email verification.
    """
    repo = VerificationRepository()
    email = request.email.lower()

    if repo.get_user_row(email):
        raise HTTPException(status_code=400, detail="Email already registered")

    try:
        repo.create_account(email, hash_password(request.password), SystemClock().now())
    except IntegrityError:
        raise HTTPException(status_code=400, detail="Email already registered")

    return MessageResponse(message="Registered successfully. Please login.")


@router.post("/login", response_model=TokenResponse)
def login(request: LoginRequest):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    user = VerificationRepository().get_user_row(request.email.lower())

    if not user:
        raise HTTPException(status_code=401, detail="Invalid email or password")

    if not user.is_active:
        raise HTTPException(status_code=403, detail="Account deactivated")

    if not verify_password(request.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    token = create_access_token(data={"sub": str(user.user_id), "account_type": user.account_type})

    return TokenResponse(access_token=token, user_id=user.user_id, account_type=user.account_type)


@router.get("/me", response_model=UserResponse)
def get_me(user: dict = Depends(get_current_user)):
    """Get current authenticated user's info."""
    row = VerificationRepository().get_user_row_by_id(user["user_id"])

    return UserResponse(
        user_id=row.user_id, email=row.email, account_type=row.account_type,
        company_name=row.company_name, company_email_verified=bool(row.company_email_verified),
        is_active=bool(row.is_active), created_at=row.created_at
    )
