"""Login, signup and bearer-token authentication."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Annotated

from fastapi import APIRouter, Header, HTTPException

from ..accounts import UsernameTakenError, UserStore
from ..tokens import TokenError, TokenService
from .schemas import LoginRequest, SignupRequest

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def create_auth_router(users: UserStore, tokens: TokenService) -> APIRouter:
    router = APIRouter(prefix="/api", tags=["auth"])

    @router.post("/login")
    def login(body: LoginRequest) -> dict:
        user = users.authenticate(body.username, body.password)
        if user is None:
            logger.info("Failed login for %r", body.username)
            raise HTTPException(status_code=401, detail="Invalid credentials")
        return {"token": tokens.issue(user), "user": user.to_dict()}

    @router.post("/signup", status_code=201)
    def signup(body: SignupRequest) -> dict:
        try:
            user = users.create(body.username, body.password)
        except UsernameTakenError:
            raise HTTPException(status_code=409, detail="Username already exists")
        return {"token": tokens.issue(user), "user": user.to_dict()}

    return router


def create_auth_dependency(tokens: TokenService) -> Callable[..., int]:
    """Build a dependency that resolves the caller's user id from the bearer token."""

    def current_user_id(authorization: Annotated[str | None, Header()] = None) -> int:
        if not authorization:
            raise HTTPException(status_code=401, detail="Authorization header required")
        if not authorization.startswith(BEARER_PREFIX) or len(authorization) <= len(BEARER_PREFIX):
            raise HTTPException(status_code=401, detail="Invalid authorization header format")
        try:
            claims = tokens.verify(authorization[len(BEARER_PREFIX):])
        except TokenError as e:
            logger.debug("Rejected token: %s", e)
            raise HTTPException(status_code=401, detail="Invalid or expired token")
        return claims["user_id"]

    return current_user_id
