"""
Versioned upstream configuration: GraphQL documents and CSS selectors.

When LeetCode or GitHub change their markup, add a new version next to the
current one and point the CURRENT_* names at it; fetchers read only those.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class GitHubSelectors:
    version: str
    # Login handle; the profile is considered missing when this is absent.
    anchor: str
    name: str
    nickname: str
    bio: str
    links: str
    followers: str
    repo_counter: str
    repo_items: str
    repo_link: str = "a"


@dataclass(frozen=True)
class LeetCodeSelectors:
    version: str
    username: tuple[str, ...]
    name: tuple[str, ...]
    image: tuple[tuple[str, str], ...]
    rank: tuple[str, ...]
    total_questions: tuple[str, ...]
    ready: str = '[class*="text-"]'


@dataclass(frozen=True)
class GraphQLQuery:
    version: str
    document: str
    recent_submissions_limit: int = 5
    badges_limit: int = 5
    headers: dict[str, str] = field(default_factory=dict)


GITHUB_SELECTORS_V1 = GitHubSelectors(
    version="2024-01",
    anchor=".p-nickname",
    name=".p-name",
    nickname=".p-nickname",
    bio=".p-note",
    links=".vcard-detail .wb-break-all",
    followers=".Link--secondary.no-underline.no-wrap",
    repo_counter=".Counter",
    repo_items=".d-inline-block.mb-1",
)

LEETCODE_SELECTORS_V1 = LeetCodeSelectors(
    version="2024-01",
    username=("div.text-label-3", '[class*="username"]', 'div[class*="text-label-3"]'),
    name=("div.text-label-1.font-semibold", 'div[class*="font-semibold"]', "h1"),
    image=(('img[alt*="avatar"]', "src"), ("img.rounded-lg", "src")),
    rank=("span.font-medium", 'div[class*="ranking"]'),
    total_questions=("div.text-sd-foreground", 'span[class*="total"]'),
)

LEETCODE_PROFILE_QUERY_V1 = GraphQLQuery(
    version="2024-01",
    document="""
    query getUserProfile($username: String!) {
      matchedUser(username: $username) {
        username
        profile {
          realName
          userAvatar
          ranking
          reputation
        }
        submitStats {
          acSubmissionNum {
            difficulty
            count
          }
        }
        badges {
          id
          displayName
          icon
          creationDate
        }
      }
      recentAcSubmissionList(username: $username, limit: 10) {
        title
        titleSlug
        timestamp
      }
    }
    """,
    headers={"Content-Type": "application/json", "Referer": "https://leetcode.com"},
)

CURRENT_GITHUB_SELECTORS = GITHUB_SELECTORS_V1
CURRENT_LEETCODE_SELECTORS = LEETCODE_SELECTORS_V1
CURRENT_LEETCODE_QUERY = LEETCODE_PROFILE_QUERY_V1
