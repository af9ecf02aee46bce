"""Request bodies for the device-assignment endpoints."""

from __future__ import annotations

from datetime import date
from typing import Literal

from pydantic import BaseModel, Field


class ProposeAssignmentRequest(BaseModel):
    device_id: str
    survey_id: str
    from_date: date
    to_date: date
    assigned_by: str
    notes: str | None = None
    device_name: str | None = None
    survey_name: str | None = None


class ExtendAssignmentRequest(BaseModel):
    to_date: date


class RevokeAssignmentRequest(BaseModel):
    outcome: Literal["COMPLETED", "CANCELLED"]


class AmendNotesRequest(BaseModel):
    notes: str | None = None


class AvailableDevicesRequest(BaseModel):
    device_ids: list[str] = Field(default_factory=list)
