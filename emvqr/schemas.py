"""Pydantic schemas for API contracts."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class DecodeRequest(BaseModel):
    payload: str = Field(min_length=1, max_length=512, description="Complete QR payload string")


class DecodeResponse(BaseModel):
    fields: dict[str, Any] = Field(description="Data objects keyed by tag; templates are nested objects")
    tags: list[str]
    crc: str


class EncodeRequest(BaseModel):
    fields: dict[str, str | dict[str, Any] | None] = Field(description="Data objects keyed by tag; nested objects are templates, null is skipped")


class EncodeResponse(BaseModel):
    payload: str
    crc: str


class InspectRequest(BaseModel):
    payload: str = Field(min_length=1, max_length=512)
    paths: list[str] = Field(min_length=1, description="Dotted tag paths such as 62.05")


class InspectResponse(BaseModel):
    values: dict[str, str | None]


class AmendRequest(BaseModel):
    payload: str = Field(min_length=1, max_length=512)
    updates: dict[str, str | None] = Field(description="Path updates; null removes the field")
