# app/models/api/profile_request.py
from pydantic import BaseModel, Field


class BatchProfileRequest(BaseModel):
    """Request body for POST /batch. Size and platform are checked by the batch service."""

    usernames: list[str] | None = Field(
        default=None, description="Usernames to look up (1-20)"
    )
    platform: str | None = Field(default=None, description="'github' or 'leetcode'")
