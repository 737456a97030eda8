"""
Authentication Module

Handles the school account lifecycle:
1. Signup with a licence number emailed to the school
2. One-time activation with that licence number
3. Email/password sign-in issuing a session cookie

API Endpoints (see router.py):
- POST /auth/signup - Register a school
- POST /auth/activate - Activate with the licence number
- POST /auth/signin - Sign in
- GET /auth/me - Current school
"""

from schoolauth.modules.auth.schemas import (
    ActivateRequest,
    SessionResponse,
    SigninRequest,
    SignupRequest,
)

__all__ = ["ActivateRequest", "SessionResponse", "SigninRequest", "SignupRequest"]
