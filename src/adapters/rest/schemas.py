"""Pydantic models for REST API request/response validation."""

from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

from domain.models import UserRole


# --- Agent ---

class HistoryItem(BaseModel):
    role: Literal["human", "user", "ai", "assistant"]
    content: str


class RunBody(BaseModel):
    input: str = Field(..., min_length=1)
    chat_history: list[HistoryItem] = Field(default_factory=list)
    role: Optional[UserRole] = None
    name: Optional[str] = None


class RunOut(BaseModel):
    type: Literal["plain_text", "tool_result"]
    text: Optional[str] = None
    tool: Optional[str] = None
    payload: Optional[dict[str, Any]] = None


# --- Menus ---

class MenuBody(BaseModel):
    user_query: str = Field(..., min_length=1)
    role: Optional[UserRole] = None


# --- Roles ---

class RoleOut(BaseModel):
    role: UserRole
    permissions: dict[str, Any]


# --- Errors ---

class ErrorOut(BaseModel):
    error: str
    detail: str
