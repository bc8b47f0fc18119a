"""
FastAPI routes for authentication.

Prefix: /auth
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import JSONResponse

from drivedoc.models.user import LoginRequest, OAuthRequest, SignupRequest, User

from .deps import Services, get_services, require_login

router = APIRouter(prefix="/auth", tags=["auth"])

SECONDS_PER_DAY = 24 * 60 * 60


def _set_token_cookie(response: Response, services: Services, token: str) -> None:
    """
    Attach the credential as an HTTP-only cookie.

    Clients can also send the token in Authorization headers if preferred.
    """
    settings = services.settings
    response.set_cookie(
        key=settings.auth.cookie_name,
        value=token,
        max_age=settings.auth.token_expiry_days * SECONDS_PER_DAY,
        httponly=True,
        secure=settings.app.is_production,
        samesite="strict",
    )


def _token_response(
    services: Services, user: User, token: str, message: str, status_code: int = status.HTTP_200_OK
) -> JSONResponse:
    response = JSONResponse(
        status_code=status_code,
        content={
            "success": True,
            "message": message,
            "token": token,  # also in the body for header-based clients
            "user": user.public(),
        },
    )
    _set_token_cookie(response, services, token)
    return response


@router.post("/signup", status_code=status.HTTP_201_CREATED)
def signup(payload: SignupRequest, services: Services = Depends(get_services)) -> Any:
    """Register a new user: {fullName, email, phone, country, password}."""
    user, token = services.auth.signup(payload)
    return _token_response(
        services, user, token, "Account created successfully", status.HTTP_201_CREATED
    )


@router.post("/login")
def login(payload: LoginRequest, services: Services = Depends(get_services)) -> Any:
    """Log in with {email, password}. Same response shape as /signup."""
    user, token = services.auth.login(payload)
    return _token_response(services, user, token, "Login successful")


@router.post("/logout")
def logout(services: Services = Depends(get_services)) -> Any:
    response = JSONResponse({"success": True, "message": "Logged out"})
    response.delete_cookie(services.settings.auth.cookie_name)
    return response


@router.get("/me")
def me(current_user: User = Depends(require_login)) -> Dict[str, Any]:
    """Return the current authenticated user."""
    return {"success": True, "user": current_user.public()}


@router.post("/oauth/google")
def oauth_google(payload: OAuthRequest, services: Services = Depends(get_services)) -> Any:
    user, token = services.auth.oauth_login("google", payload.access_token)
    return _token_response(services, user, token, "Login successful")


@router.post("/oauth/facebook")
def oauth_facebook(payload: OAuthRequest, services: Services = Depends(get_services)) -> Any:
    user, token = services.auth.oauth_login("facebook", payload.access_token)
    return _token_response(services, user, token, "Login successful")
