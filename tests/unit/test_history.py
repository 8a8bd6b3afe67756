"""Tests for retrieving the commit history between releases."""

from __future__ import annotations

import httpx
import pytest
from conftest import ClientFactory, api_commit
from pytest_mock import MockerFixture

from tag_release.actions import WorkflowCommands
from tag_release.core.history import (
    DEFAULT_BRANCH_HEAD,
    fetch_commit_range,
    get_commits_since_release,
    resolve_base_ref,
)
from tag_release.exceptions import DegradedLookupError, GitHubAPIError, RangeFetchError
from tag_release.forge.github import GitHubClient


def github_api(*, ref_status: int = 200, compare_status: int = 200, commits=None):
    """Request handler emulating the ref and compare endpoints."""
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if "/git/ref/" in request.url.path:
            if ref_status != 200:
                return httpx.Response(ref_status, json={"message": "Not Found"})
            return httpx.Response(200, json={"ref": "refs/tags/v1.0.0", "object": {"sha": "111"}})
        if "/compare/" in request.url.path:
            if compare_status != 200:
                return httpx.Response(compare_status, json={"message": "No common ancestor"})
            return httpx.Response(200, json={"commits": commits or []})
        return httpx.Response(404, json={"message": "Not Found"})

    return handler, requests


class TestResolveBaseRef:
    """Tests for resolve_base_ref()."""

    def test_existing_tag(self, github_client: ClientFactory):
        handler, requests = github_api()

        assert resolve_base_ref(github_client(handler), "octo", "widgets", "v1.0.0") == "v1.0.0"
        assert requests[0].url.path == "/repos/octo/widgets/git/ref/tags/v1.0.0"

    def test_missing_tag(self, github_client: ClientFactory):
        handler, _ = github_api(ref_status=404)

        with pytest.raises(DegradedLookupError, match="Not Found"):
            resolve_base_ref(github_client(handler), "octo", "widgets", "v1.0.0")

    def test_empty_tag_skips_lookup(self, github_client: ClientFactory):
        handler, requests = github_api()

        with pytest.raises(DegradedLookupError):
            resolve_base_ref(github_client(handler), "octo", "widgets", "")
        assert requests == []


class TestFetchCommitRange:
    """Tests for fetch_commit_range()."""

    def test_wraps_api_errors(self, mocker: MockerFixture):
        client = mocker.create_autospec(GitHubClient, instance=True)
        client.compare_commits.side_effect = GitHubAPIError("rate limited", status_code=403)

        with pytest.raises(RangeFetchError, match="rate limited"):
            fetch_commit_range(client, "octo", "widgets", "v1.0.0", "abc")


class TestGetCommitsSinceRelease:
    """Tests for get_commits_since_release()."""

    def test_commits_since_previous_tag(self, github_client: ClientFactory, log: WorkflowCommands, output):
        handler, requests = github_api(commits=[api_commit("a1", "feat: one"), api_commit("b2", "fix: two")])

        commits = get_commits_since_release(github_client(handler), "octo", "widgets", "v1.0.0", "abc", log=log)

        assert [c.sha for c in commits] == ["a1", "b2"]
        assert requests[-1].url.path == "/repos/octo/widgets/compare/v1.0.0...abc"
        assert "Successfully retrieved 2 commits between v1.0.0 and abc" in output.getvalue()

    def test_first_release_falls_back_to_head(
        self, github_client: ClientFactory, log: WorkflowCommands, output
    ):
        """A missing previous tag compares against the default branch head."""
        handler, requests = github_api(ref_status=404, commits=[api_commit("a1", "feat: one")])

        commits = get_commits_since_release(github_client(handler), "octo", "widgets", "", "abc", log=log)

        assert [c.sha for c in commits] == ["a1"]
        assert requests[-1].url.path == f"/repos/octo/widgets/compare/{DEFAULT_BRANCH_HEAD}...abc"
        logged = output.getvalue()
        assert "Assuming this is the first release." in logged
        assert "::warning::" not in logged
        assert "::error::" not in logged

    def test_unresolvable_tag_falls_back_to_head(self, github_client: ClientFactory, log: WorkflowCommands):
        handler, requests = github_api(ref_status=404)

        assert get_commits_since_release(github_client(handler), "octo", "widgets", "v1.0.0", "abc", log=log) == []
        assert requests[-1].url.path == "/repos/octo/widgets/compare/HEAD...abc"

    def test_compare_failure_yields_empty_range(
        self, github_client: ClientFactory, log: WorkflowCommands, output
    ):
        handler, _ = github_api(compare_status=404)

        commits = get_commits_since_release(github_client(handler), "octo", "widgets", "v1.0.0", "abc", log=log)

        assert commits == []
        assert "::warning::Could not find any commits between v1.0.0 and abc" in output.getvalue()

    def test_malformed_comparison_yields_empty_range(
        self, github_client: ClientFactory, log: WorkflowCommands, output
    ):
        """A comparison body that is not JSON degrades like a failed request."""
        handler, _ = github_api()

        def upstream_error(request: httpx.Request) -> httpx.Response:
            if "/compare/" in request.url.path:
                return httpx.Response(200, text="<html>upstream error</html>")
            return handler(request)

        commits = get_commits_since_release(
            github_client(upstream_error), "octo", "widgets", "v1.0.0", "abc", log=log
        )

        assert commits == []
        assert "::warning::Could not find any commits between v1.0.0 and abc" in output.getvalue()

    def test_runs_in_log_group(self, github_client: ClientFactory, log: WorkflowCommands, output):
        handler, _ = github_api()

        get_commits_since_release(github_client(handler), "octo", "widgets", "v1.0.0", "abc", log=log)
        lines = output.getvalue().splitlines()

        assert lines[0] == "::group::Retrieving commit history"
        assert lines[-1] == "::endgroup::"
