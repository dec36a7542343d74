"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
Company verification schemas use camelCase on the wire (the web client
sends companyEmail / companyName / companyWebsite).
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional
from datetime import datetime


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8)

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: int
    account_type: str

class UserResponse(BaseModel):
    user_id: int
    email: str
    account_type: str
    company_name: Optional[str] = None
    company_email_verified: bool = False
    is_active: bool
    created_at: datetime


# ============================================================
# COMPANY VERIFICATION SCHEMAS
# ============================================================

class CompanyVerificationSubmit(CamelModel):
    # plain str: format and domain rules belong to the verification service
    company_email: str = Field(..., alias="companyEmail")
    company_name: str = Field(..., alias="companyName")
    company_website: Optional[str] = Field(None, alias="companyWebsite")

class CompanyVerificationSubmitResponse(CamelModel):
    request_id: Optional[str] = Field(None, alias="requestId")
    message: str
    derived_company_name: Optional[str] = Field(None, alias="derivedCompanyName")
    delivery_warning: Optional[str] = Field(None, alias="deliveryWarning")
    already_verified: bool = Field(False, alias="alreadyVerified")

class CompanyVerificationConfirm(CamelModel):
    request_id: str = Field(..., alias="requestId")
    token: str

class CompanyVerificationConfirmResponse(CamelModel):
    account_id: int = Field(..., alias="accountId")
    company_name: str = Field(..., alias="companyName")
    message: str = "Company email verified. Recruiter access is now active."

class PendingVerificationResponse(CamelModel):
    request_id: str = Field(..., alias="requestId")
    candidate_email: str = Field(..., alias="candidateEmail")
    candidate_company_name: str = Field(..., alias="candidateCompanyName")
    expires_at: datetime = Field(..., alias="expiresAt")

class CompanyVerificationStatusResponse(CamelModel):
    account_id: int = Field(..., alias="accountId")
    user_type: str = Field(..., alias="userType")
    company_name: Optional[str] = Field(None, alias="companyName")
    company_email_verified: bool = Field(False, alias="companyEmailVerified")
    pending_request: Optional[PendingVerificationResponse] = Field(None, alias="pendingRequest")


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True

class ErrorResponse(BaseModel):
    message: str
    kind: str
