# app/models/api/profile_response.py
"""
HTTP response envelopes. Field names are snake_case in Python and camelCase
on the wire (responseTime, availableEndpoints); every envelope carries
status + message.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class ErrorResponse(ApiModel):
    status: bool = False
    message: str
    available_endpoints: list[str] | None = None

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


class ServiceInfoResponse(ApiModel):
    status: bool = True
    message: str
    service: str
    version: str
    endpoints: list[str]


class ProfileResponse(ApiModel):
    """Response for GET /github/{username} and GET /leetcode/{username}"""

    status: bool
    message: str
    data: dict[str, Any] | None = None
    cached: bool = False
    source: str | None = None
    response_time: str


class CombinedProfileData(ApiModel):
    username: str
    github: dict[str, Any] | None = None
    leetcode: dict[str, Any] | None = None


class CombinedProfileResponse(ApiModel):
    """Response for GET /profile/{username}"""

    status: bool
    message: str
    data: CombinedProfileData
    response_time: str


class BatchItemResponse(ApiModel):
    username: str
    data: dict[str, Any] | None = None
    cached: bool = False
    error: str | None = None
    status: bool


class BatchSummaryResponse(ApiModel):
    total: int
    successful: int
    failed: int
    response_time: str


class BatchResponse(ApiModel):
    """Response for POST /batch"""

    status: bool
    message: str
    platform: str
    summary: BatchSummaryResponse
    results: list[BatchItemResponse] = Field(default_factory=list)


class CacheEntryDeleteResponse(ApiModel):
    """Response for DELETE /cache/{platform}/{username}"""

    status: bool
    message: str
    deleted: bool


class CachePlatformDeleteResponse(ApiModel):
    """Response for DELETE /cache/{platform}"""

    status: bool
    message: str
    deleted: int
