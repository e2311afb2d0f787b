"""
Tests for the LeetCode GraphQL fetcher using httpx.MockTransport.
"""

import json

import httpx
import pytest

from app.models.domain.profile_domain import OutcomeKind, ProfileSource
from app.services.fetchers.leetcode_api import LeetCodeGraphQLFetcher

FULL_RESPONSE = {
    "data": {
        "matchedUser": {
            "username": "alice",
            "profile": {
                "realName": "Alice Liddell",
                "userAvatar": "https://assets.leetcode.com/alice.png",
                "ranking": 12345,
                "reputation": 42,
            },
            "submitStats": {
                "acSubmissionNum": [
                    {"difficulty": "All", "count": 300},
                    {"difficulty": "Easy", "count": 150},
                    {"difficulty": "Medium", "count": 120},
                    {"difficulty": "Hard", "count": 30},
                ]
            },
            "badges": [
                {"id": str(i), "displayName": f"Badge {i}", "icon": f"/b{i}.png", "creationDate": ""}
                for i in range(7)
            ],
        },
        "recentAcSubmissionList": [
            {"title": f"Problem {i}", "titleSlug": f"problem-{i}", "timestamp": "1700000000"}
            for i in range(10)
        ],
    }
}


def _fetcher(handler) -> LeetCodeGraphQLFetcher:
    return LeetCodeGraphQLFetcher(
        endpoint="https://leetcode.test/graphql",
        timeout=1.0,
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_profile_is_shaped_from_graphql_response():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["body"] = json.loads(request.content)
        seen["referer"] = request.headers.get("referer")
        return httpx.Response(200, json=FULL_RESPONSE)

    outcome = await _fetcher(handler).fetch_profile("alice")

    assert outcome.is_success
    assert outcome.result.source is ProfileSource.API
    payload = outcome.payload
    assert payload["name"] == "Alice Liddell"
    assert payload["rank"] == 12345
    assert payload["solvedProblems"] == {"easy": 150, "medium": 120, "hard": 30, "total": 300}
    assert payload["totalSolved"] == 300
    assert len(payload["recentSubmissions"]) == 5
    assert payload["recentSubmissions"][0]["date"] == "2023-11-14"
    assert payload["badges"][0] == {"name": "Badge 0", "icon": "/b0.png"}
    assert len(payload["badges"]) == 5
    assert seen["body"]["variables"] == {"username": "alice"}
    assert seen["referer"] == "https://leetcode.com"


@pytest.mark.asyncio
async def test_missing_optional_fields_get_defaults():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={
                "data": {
                    "matchedUser": {"username": "bob", "profile": {}, "badges": None},
                    "recentAcSubmissionList": None,
                }
            },
        )

    outcome = await _fetcher(handler).fetch_profile("bob")

    payload = outcome.payload
    assert payload["name"] == "bob"
    assert payload["rank"] is None
    assert payload["reputation"] == 0
    assert payload["badges"] == []
    assert payload["recentSubmissions"] == []
    assert payload["solvedProblems"] == {"easy": 0, "medium": 0, "hard": 0, "total": 0}


@pytest.mark.asyncio
async def test_null_matched_user_is_not_found():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={
                "data": {"matchedUser": None, "recentAcSubmissionList": None},
                "errors": [{"message": "That user does not exist."}],
            },
        )

    outcome = await _fetcher(handler).fetch_profile("ghost")

    assert outcome.kind is OutcomeKind.NOT_FOUND


@pytest.mark.asyncio
async def test_http_404_is_not_found():
    outcome = await _fetcher(lambda request: httpx.Response(404)).fetch_profile("ghost")

    assert outcome.kind is OutcomeKind.NOT_FOUND


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, text="oops"),
        httpx.Response(429, text="slow down"),
        httpx.Response(200, text="<html>challenge</html>"),
        httpx.Response(200, json={"errors": [{"message": "bad query"}]}),
        httpx.Response(200, json=["unexpected"]),
    ],
)
async def test_bad_responses_are_upstream_errors(response):
    outcome = await _fetcher(lambda request: response).fetch_profile("alice")

    assert outcome.kind is OutcomeKind.UPSTREAM_ERROR


@pytest.mark.asyncio
async def test_timeout_is_upstream_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    outcome = await _fetcher(handler).fetch_profile("alice")

    assert outcome.kind is OutcomeKind.UPSTREAM_ERROR
    assert "timed out" in outcome.message


@pytest.mark.asyncio
async def test_connection_error_is_upstream_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    outcome = await _fetcher(handler).fetch_profile("alice")

    assert outcome.kind is OutcomeKind.UPSTREAM_ERROR
