"""Request bodies for the REST API."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from ..accounts import MAX_PASSWORD_BYTES, MIN_PASSWORD_LENGTH

MAX_QUANTITY = 2**63 - 1  # SQLite INTEGER range


class LoginRequest(BaseModel):
    username: str
    password: str

    @field_validator("username")
    @classmethod
    def _strip_username(cls, v: str) -> str:
        return v.strip()


class SignupRequest(BaseModel):
    username: str
    password: str

    @field_validator("username")
    @classmethod
    def _username_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Username is required")
        return v

    @field_validator("password")
    @classmethod
    def _password_length(cls, v: str) -> str:
        if len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        if len(v.encode()) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        return v


class OrderRequest(BaseModel):
    symbol: str = Field(max_length=16)
    side: Literal["buy", "sell"]
    quantity: int = Field(gt=0, le=MAX_QUANTITY)
    price: float = Field(gt=0, allow_inf_nan=False)

    @field_validator("symbol")
    @classmethod
    def _normalize_symbol(cls, v: str) -> str:
        v = v.upper().strip()
        if not v:
            raise ValueError("Symbol is required")
        return v
