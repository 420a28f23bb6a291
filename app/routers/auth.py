import json
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request

from app.activity import client_ip, log_user_activity, user_agent
from app.auth import generate_token, require_admin, verify_password
from app.config import settings
from app.errors import InvalidCredentials, ValidationError
from app.schemas import ActivityLogIn, AuthUser, LoginOut, MessageOut

logger = logging.getLogger(__name__)

router = APIRouter()


async def _record_login(request: Request, username: str, description: str, **metadata) -> None:
    entry = ActivityLogIn(
        username=username,
        action_type="login",
        description=description,
        ip_address=client_ip(request),
        user_agent=user_agent(request),
        metadata={"login_time": datetime.now(timezone.utc).isoformat(), **metadata},
    )
    await log_user_activity(request.app.state.backend.sessionmaker, entry)


@router.post("/auth/login", response_model=LoginOut)
async def login(request: Request) -> LoginOut:
    # The body is parsed by hand so empty and malformed payloads get their own messages
    body = await request.body()
    if not body.strip():
        raise ValidationError("Request body is required")
    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationError("Invalid JSON in request body")

    username = payload.get("username") if isinstance(payload, dict) else None
    password = payload.get("password") if isinstance(payload, dict) else None
    if not username or not password or not isinstance(username, str) or not isinstance(password, str):
        raise ValidationError("Username and password are required")

    if username != settings.ADMIN_USERNAME:
        logger.info("Rejected login for unknown user")
        raise InvalidCredentials("Invalid credentials")

    if not verify_password(password, settings.ADMIN_PASSWORD_HASH):
        logger.warning("Rejected login for %s: invalid password", username)
        await _record_login(
            request,
            username,
            f"Failed login attempt for user {username}",
            success=False,
            reason="invalid_password",
        )
        raise InvalidCredentials("Invalid credentials")

    token = generate_token(username)
    await _record_login(request, username, f"User {username} logged in successfully", success=True)
    logger.info("User %s logged in", username)
    return LoginOut(message="Login successful", token=token, user=AuthUser(username=username))


@router.post("/auth/logout", response_model=MessageOut)
async def logout(request: Request, user: dict = Depends(require_admin)) -> MessageOut:
    username = user["username"]
    entry = ActivityLogIn(
        username=username,
        action_type="logout",
        description=f"User {username} logged out",
        ip_address=client_ip(request),
        user_agent=user_agent(request),
        metadata={"logout_time": datetime.now(timezone.utc).isoformat()},
    )
    await log_user_activity(request.app.state.backend.sessionmaker, entry)
    return MessageOut(message="Logout successful")
