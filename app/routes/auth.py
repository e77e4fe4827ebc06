"""Signup, login, logout and current-user endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.config import settings
from app.dependencies import Services, current_user_id, get_services
from app.errors import EmailAlreadyRegistered, InvalidCredentials
from app.schemas.auth import LoginRequest, SignupRequest, UserProfile
from app.utils.auth import create_session_cookie

router = APIRouter()


def _start_session(response: Response, user_id: str) -> None:
    response.set_cookie(
        settings.session_cookie_name,
        create_session_cookie(user_id, settings.session_secret, settings.session_ttl_minutes),
        max_age=settings.session_ttl_minutes * 60,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )


@router.post("/signup", response_model=UserProfile, status_code=status.HTTP_201_CREATED)
def signup(body: SignupRequest, response: Response, services: Services = Depends(get_services)):
    try:
        user = services.users.signup(body.email, body.name, body.password)
    except EmailAlreadyRegistered as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    _start_session(response, user.id)
    return user


@router.post("/login", response_model=UserProfile)
def login(body: LoginRequest, response: Response, services: Services = Depends(get_services)):
    try:
        user = services.users.login(body.email, body.password)
    except InvalidCredentials as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials") from exc
    _start_session(response, user.id)
    return user


@router.post("/logout")
def logout(response: Response):
    response.delete_cookie(settings.session_cookie_name)
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=UserProfile)
def me(user_id: str = Depends(current_user_id), services: Services = Depends(get_services)):
    user = services.users.get_profile(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return user
