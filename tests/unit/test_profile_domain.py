import pytest

from app.models.domain.profile_domain import Platform, ProfileQuery, ProfileQueryError


def test_query_normalizes_username_and_platform():
    query = ProfileQuery.build(" LeetCode ", "  Alice ")

    assert query.platform is Platform.LEETCODE
    assert query.username == "alice"
    assert query.cache_key("user") == "user:leetcode:alice"


@pytest.mark.parametrize("username", ["", "   ", None])
def test_query_rejects_blank_username(username):
    with pytest.raises(ProfileQueryError):
        ProfileQuery.build("github", username)


def test_unknown_platform_is_rejected():
    with pytest.raises(ProfileQueryError, match="twitter"):
        ProfileQuery.build("twitter", "alice")
