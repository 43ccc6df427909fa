"""
Common response models and utilities.

User-visible notifications and error payloads shared by all views.

Dependencies: pydantic
System role: Common API response structures
"""

from typing import Literal

from pydantic import BaseModel, Field


class Notification(BaseModel):
    """Transient message shown to the user after an operation."""

    title: str = Field(description="Short headline")
    description: str = Field(description="Detail text")
    variant: Literal["default", "destructive"] = Field(
        default="default",
        description="'destructive' for failures",
    )

    @classmethod
    def error(cls, title: str, description: str) -> "Notification":
        return cls(title=title, description=description, variant="destructive")


class ErrorResponse(BaseModel):
    """Error response schema (FastAPI puts the notification under `detail`)."""

    detail: Notification
