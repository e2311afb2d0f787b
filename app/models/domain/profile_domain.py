"""
Domain models for profile lookups.

A ProfileQuery identifies one (platform, username) pair; fetchers turn it into
a FetchOutcome, and the orchestrator wraps that in a ProfileResolution that
also says whether the answer came from cache.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Platform(str, Enum):
    GITHUB = "github"
    LEETCODE = "leetcode"

    @classmethod
    def parse(cls, value: str | None) -> "Platform":
        """Case-insensitive lookup; raises ProfileQueryError for unknown platforms."""
        normalized = (value or "").strip().lower()
        try:
            return cls(normalized)
        except ValueError:
            supported = ", ".join(p.value for p in cls)
            raise ProfileQueryError(
                f"Unsupported platform '{value}'. Use one of: {supported}"
            ) from None


class ProfileSource(str, Enum):
    API = "api"
    SCRAPER = "scraper"
    CACHE = "cache"


class OutcomeKind(str, Enum):
    SUCCESS = "success"
    NOT_FOUND = "not_found"
    UPSTREAM_ERROR = "upstream_error"
    VALIDATION_ERROR = "validation_error"


class ProfileQueryError(ValueError):
    """Raised when a platform or username cannot form a valid query."""


class ProfileQuery(BaseModel):
    """Normalized lookup key. Usernames are trimmed and lower-cased."""

    model_config = ConfigDict(frozen=True)

    platform: Platform
    username: str

    @classmethod
    def build(cls, platform: Platform | str, username: str | None) -> "ProfileQuery":
        if not isinstance(platform, Platform):
            platform = Platform.parse(platform)
        normalized = (username or "").strip().lower()
        if not normalized:
            raise ProfileQueryError("Username is required")
        return cls(platform=platform, username=normalized)

    def cache_key(self, prefix: str) -> str:
        return f"{prefix}:{self.platform.value}:{self.username}"


class ProfileResult(BaseModel):
    """A fetched profile. Payload shape is platform specific."""

    query: ProfileQuery
    payload: dict[str, Any]
    fetched_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    source: ProfileSource


class FetchOutcome(BaseModel):
    """Tagged result of a fetch: exactly one of success / not found / error."""

    kind: OutcomeKind
    result: ProfileResult | None = None
    message: str | None = None

    @classmethod
    def success(cls, result: ProfileResult) -> "FetchOutcome":
        return cls(kind=OutcomeKind.SUCCESS, result=result)

    @classmethod
    def not_found(cls, message: str = "User not found") -> "FetchOutcome":
        return cls(kind=OutcomeKind.NOT_FOUND, message=message)

    @classmethod
    def upstream_error(cls, message: str) -> "FetchOutcome":
        return cls(kind=OutcomeKind.UPSTREAM_ERROR, message=message)

    @classmethod
    def validation_error(cls, message: str) -> "FetchOutcome":
        return cls(kind=OutcomeKind.VALIDATION_ERROR, message=message)

    @property
    def is_success(self) -> bool:
        return self.kind is OutcomeKind.SUCCESS

    @property
    def payload(self) -> dict[str, Any] | None:
        return self.result.payload if self.result else None


class ProfileResolution(BaseModel):
    """Orchestrator answer for one query."""

    outcome: FetchOutcome
    cached: bool = False


class BatchItemResult(BaseModel):
    username: str
    outcome: FetchOutcome
    cached: bool = False


class BatchSummary(BaseModel):
    total: int
    successful: int
    failed: int


class BatchResolution(BaseModel):
    platform: Platform
    items: list[BatchItemResult]
    summary: BatchSummary


class CombinedProfile(BaseModel):
    """GitHub + LeetCode payloads for one username; a failed side is None."""

    username: str
    github: dict[str, Any] | None = None
    leetcode: dict[str, Any] | None = None
