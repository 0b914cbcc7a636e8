"""Pydantic request models for daemon endpoints."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from deeplink_bridge.activation import ACTION_VIEW


class ActivationRequest(BaseModel):
    action: str | None = ACTION_VIEW
    uri: str | None = None


class MethodCallRequest(BaseModel):
    method: str
    arguments: Any = None
