"""
Job Platform - Company Email Verification

Promotes job seeker accounts to recruiters once they prove control of a
company email address.

Architecture:
- PostgreSQL (SQLAlchemy): accounts and verification requests
- SMTP: verification emails
- FastAPI: HTTP surface for the web client
"""

__version__ = "1.0.0"
