"""End-to-end tests for the domain resources through the Falcon test client.

The app runs over in-memory stores, the fake gateway, and the mock writer.
"""

from __future__ import annotations

import datetime as dt
import typing as typ

import falcon
import pytest

from prscribe.github.errors import GitHubAPIError
from tests.helpers.builders import pull_request, pull_request_detail
from tests.helpers.fakes import ALICE, BOB

if typ.TYPE_CHECKING:
    import falcon.testing

    from tests.helpers.fakes import FakeGateway, MutableClock

_ALICE_AUTH = {"Authorization": f"Bearer {ALICE.github_token}"}
_BOB_AUTH = {"Authorization": f"Bearer {BOB.github_token}"}
_REPO = "acme/widgets"


def _register(client: falcon.testing.TestClient, url: str) -> dict[str, typ.Any]:
    result = client.simulate_post(
        "/repositories", json={"url": url}, headers=_ALICE_AUTH
    )
    assert result.status == falcon.HTTP_201, result.text
    return result.json["repository"]


@pytest.fixture
def served_gateway(gateway: FakeGateway) -> FakeGateway:
    """Make the fake gateway serve PRs 110 and 112 (numbers 110, 112)."""
    gateway.listing = [pull_request(112), pull_request(110)]
    gateway.details = {
        110: pull_request_detail(110, 110),
        112: pull_request_detail(112, 112),
    }
    return gateway


class TestRepositories:
    """``/repositories`` and ``/repositories/{id}/pulls``."""

    def test_register_returns_created_repository(
        self, api_client: falcon.testing.TestClient, clock: MutableClock
    ) -> None:
        """POST registers and echoes the repository."""
        repository = _register(api_client, "https://github.com/acme/widgets")

        assert repository["name"] == "acme/widgets"
        assert repository["owner"] == "acme"
        assert repository["url"] == "https://github.com/acme/widgets"
        assert repository["ownerUserId"] == ALICE.user_id
        assert repository["createdAt"] == clock.now.isoformat()

    def test_list_is_scoped_to_caller(
        self, api_client: falcon.testing.TestClient
    ) -> None:
        """GET lists only the caller's repositories."""
        _register(api_client, "https://github.com/acme/widgets")

        mine = api_client.simulate_get("/repositories", headers=_ALICE_AUTH)
        theirs = api_client.simulate_get("/repositories", headers=_BOB_AUTH)

        assert [r["name"] for r in mine.json["repositories"]] == ["acme/widgets"]
        assert theirs.json == {"repositories": []}

    @pytest.mark.parametrize(
        ("body", "field"),
        [
            ({}, "url"),
            ({"url": 42}, "url"),
            ({"url": "https://gitlab.com/acme/widgets"}, "url"),
        ],
    )
    def test_register_rejects_bad_bodies(
        self,
        api_client: falcon.testing.TestClient,
        body: dict[str, object],
        field: str,
    ) -> None:
        """Missing, mistyped, or foreign URLs are 400s naming the field."""
        result = api_client.simulate_post(
            "/repositories", json=body, headers=_ALICE_AUTH
        )

        assert result.status == falcon.HTTP_400
        assert result.json["field"] == field

    def test_register_rejects_non_object_body(
        self, api_client: falcon.testing.TestClient
    ) -> None:
        """A JSON array is not a registration request."""
        result = api_client.simulate_post(
            "/repositories",
            json=["https://github.com/acme/widgets"],
            headers=_ALICE_AUTH,
        )

        assert result.status == falcon.HTTP_400

    def test_pulls_lists_merged_prs(
        self,
        api_client: falcon.testing.TestClient,
        served_gateway: FakeGateway,
    ) -> None:
        """The pulls route returns camelCase PR summaries."""
        repository = _register(api_client, "https://github.com/acme/widgets")

        result = api_client.simulate_get(
            f"/repositories/{repository['id']}/pulls", headers=_ALICE_AUTH
        )

        assert result.status == falcon.HTTP_200
        first = result.json["pullRequests"][0]
        assert first["id"] == 112
        assert first["authorLogin"] == "octocat"
        assert first["htmlUrl"] == "https://github.com/acme/widgets/pull/112"
        assert first["mergedAt"] == "2026-02-20T15:30:00+00:00"
        assert served_gateway.tokens == [ALICE.github_token]

    def test_pulls_of_other_users_repository_is_forbidden(
        self, api_client: falcon.testing.TestClient, served_gateway: FakeGateway
    ) -> None:
        """Bob cannot list Alice's repository."""
        repository = _register(api_client, "https://github.com/acme/widgets")

        result = api_client.simulate_get(
            f"/repositories/{repository['id']}/pulls", headers=_BOB_AUTH
        )

        assert result.status == falcon.HTTP_403
        assert served_gateway.calls == []

    def test_pulls_of_unknown_repository_is_not_found(
        self, api_client: falcon.testing.TestClient
    ) -> None:
        """Unregistered ids are 404s."""
        result = api_client.simulate_get(
            "/repositories/missing/pulls", headers=_ALICE_AUTH
        )

        assert result.status == falcon.HTTP_404


class TestArticles:
    """``/articles`` and ``/articles/{id}``."""

    def test_list_then_generate_uses_cached_listing(
        self,
        api_client: falcon.testing.TestClient,
        served_gateway: FakeGateway,
        clock: MutableClock,
    ) -> None:
        """Listing then generating within the window needs no second fetch."""
        repository = _register(api_client, "https://github.com/acme/widgets")
        api_client.simulate_get(
            f"/repositories/{repository['id']}/pulls", headers=_ALICE_AUTH
        )
        served_gateway.calls.clear()
        clock.advance(dt.timedelta(minutes=5))

        result = api_client.simulate_post(
            "/articles",
            json={"pullRequestIds": ["110"], "repositoryId": repository["id"]},
            headers=_ALICE_AUTH,
        )

        assert result.status == falcon.HTTP_201, result.text
        article = result.json["article"]
        assert article["pullRequestIds"] == [110]
        assert article["repositoryName"] == "acme/widgets"
        assert article["repositoryId"] == repository["id"]
        assert article["ownerUserId"] == ALICE.user_id
        assert article["createdAt"] == article["updatedAt"] == clock.now.isoformat()
        assert article["content"].startswith("# Recent changes in acme/widgets")
        assert [pr["id"] for pr in result.json["pullRequests"]] == [110]
        assert served_gateway.calls == []

    def test_generated_article_is_listed_and_readable(
        self, api_client: falcon.testing.TestClient, served_gateway: FakeGateway
    ) -> None:
        """A stored article shows in the listing and by id, for its owner only."""
        created = api_client.simulate_post(
            "/articles",
            json={"pullRequestIds": [112], "repositoryName": "acme/widgets"},
            headers=_ALICE_AUTH,
        ).json["article"]

        listing = api_client.simulate_get("/articles", headers=_ALICE_AUTH)
        fetched = api_client.simulate_get(
            f"/articles/{created['id']}", headers=_ALICE_AUTH
        )
        denied = api_client.simulate_get(
            f"/articles/{created['id']}", headers=_BOB_AUTH
        )

        (summary,) = listing.json["articles"]
        assert summary["id"] == created["id"]
        assert "content" not in summary
        assert fetched.json == {"article": created}
        assert denied.status == falcon.HTTP_403
        assert created["repositoryId"] is None
        assert served_gateway.tokens == [ALICE.github_token]

    @pytest.mark.parametrize(
        ("body", "field"),
        [
            ({"repositoryName": "acme/widgets"}, "pullRequestIds"),
            ({"pullRequestIds": [], "repositoryName": _REPO}, "pullRequestIds"),
            ({"pullRequestIds": ["x"], "repositoryName": _REPO}, "pullRequestIds"),
            ({"pullRequestIds": ["\u00b2"], "repositoryName": _REPO}, "pullRequestIds"),
            (
                {"pullRequestIds": ["1" * 5000], "repositoryName": _REPO},
                "pullRequestIds",
            ),
            ({"pullRequestIds": [110]}, "repositoryName"),
            ({"pullRequestIds": [110], "repositoryName": "acme"}, "repositoryName"),
            (
                {
                    "pullRequestIds": [110],
                    "repositoryName": "acme/widgets",
                    "customPrompt": 7,
                },
                "customPrompt",
            ),
        ],
    )
    def test_generate_rejects_bad_bodies(
        self,
        api_client: falcon.testing.TestClient,
        served_gateway: FakeGateway,
        body: dict[str, object],
        field: str,
    ) -> None:
        """Validation failures are 400s naming the offending field."""
        result = api_client.simulate_post("/articles", json=body, headers=_ALICE_AUTH)

        assert result.status == falcon.HTTP_400
        assert result.json["field"] == field
        assert served_gateway.calls == []

    def test_generate_with_unknown_ids_is_bad_request(
        self, api_client: falcon.testing.TestClient, served_gateway: FakeGateway
    ) -> None:
        """Selections matching no merged PR are 400s and store nothing."""
        result = api_client.simulate_post(
            "/articles",
            json={"pullRequestIds": [404], "repositoryName": "acme/widgets"},
            headers=_ALICE_AUTH,
        )

        assert result.status == falcon.HTTP_400
        listing = api_client.simulate_get("/articles", headers=_ALICE_AUTH)
        assert listing.json == {"articles": []}

    def test_generate_upstream_failure_is_bad_gateway(
        self, api_client: falcon.testing.TestClient, gateway: FakeGateway
    ) -> None:
        """GitHub outages surface as 502."""
        gateway.error = GitHubAPIError.http_error(503, "/repos/acme/widgets/pulls")

        result = api_client.simulate_post(
            "/articles",
            json={"pullRequestIds": [110], "repositoryName": "acme/widgets"},
            headers=_ALICE_AUTH,
        )

        assert result.status == falcon.HTTP_502
        assert result.json["title"] == "Upstream service error"

    def test_unknown_article_is_not_found(
        self, api_client: falcon.testing.TestClient
    ) -> None:
        """Unknown article ids are 404s."""
        result = api_client.simulate_get("/articles/missing", headers=_ALICE_AUTH)

        assert result.status == falcon.HTTP_404
