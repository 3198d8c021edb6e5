"""Module: deps."""

from datetime import date
from typing import Callable, Generator

from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy import select
from sqlalchemy.orm import Session

from vetclinic.core.config import Settings, get_settings
from vetclinic.core.roles import Role
from vetclinic.core.security import resolve_token
from vetclinic.db.models.user import User
from vetclinic.db.session import SessionLocal
from vetclinic.services.access_code import AccessCodeSession


# Dependency provider: one DB session per request lifecycle.
def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_app_settings() -> Settings:
    return get_settings()


def get_bearer_token(authorization: str | None = Header(default=None)) -> str:
    if not authorization:
        raise HTTPException(status_code=401, detail="Missing Authorization header")

    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(status_code=401, detail="Invalid Authorization header")

    return parts[1].strip()


# Resolve the bearer token issued by /auth/login to a user row.
def get_current_user(
    token: str = Depends(get_bearer_token),
    db: Session = Depends(get_db),
) -> User:
    user_id = resolve_token(token)
    if user_id is None:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    user = db.execute(select(User).where(User.user_id == user_id)).scalar_one_or_none()
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    return user


def get_current_role(user: User = Depends(get_current_user)) -> Role:
    try:
        return Role.parse(user.user_role)
    except ValueError:
        raise HTTPException(status_code=403, detail="Unrecognized role")


# Route guard factory: Depends(require_roles(Role.DOCTOR, Role.CLINICIAN)).
def require_roles(*allowed: Role) -> Callable[..., Role]:
    def _guard(role: Role = Depends(get_current_role)) -> Role:
        if role not in allowed:
            raise HTTPException(status_code=403, detail="Insufficient permissions.")
        return role

    return _guard


# The access-code slot lives in the signed session cookie; None when no SessionMiddleware is installed.
def get_access_session(request: Request) -> AccessCodeSession:
    session = request.session if "session" in request.scope else None
    return AccessCodeSession(session)


# Today's date provider; overridden in tests to pin age calculations.
def get_clock() -> Callable[[], date]:
    return date.today
