"""Shared test fixtures."""

from __future__ import annotations

import io
import json
from collections.abc import Callable, Iterator
from datetime import datetime
from typing import Any

import httpx
import pytest
from rich.console import Console

from tag_release.actions import WorkflowCommands
from tag_release.core.commits import Commit
from tag_release.forge.github import GitHubClient

API_URL = "https://api.github.com"
REPO_URL = "https://github.com/octo/widgets"

ClientFactory = Callable[[Callable[[httpx.Request], httpx.Response]], GitHubClient]


def make_commit(sha: str, message: str) -> Commit:
    """Build a Commit with a GitHub-style html_url."""
    return Commit(
        sha=sha,
        message=message,
        author_name="Test",
        author_email="test@test.com",
        date=datetime(2024, 1, 1, 12, 0, 0),
        html_url=f"{REPO_URL}/commit/{sha}",
    )


def api_commit(sha: str, message: str) -> dict[str, Any]:
    """A commit object as returned by the compare endpoint."""
    return {
        "sha": sha,
        "html_url": f"{REPO_URL}/commit/{sha}",
        "commit": {
            "message": message,
            "author": {"name": "Test", "email": "test@test.com", "date": "2024-01-01T12:00:00Z"},
        },
    }


@pytest.fixture
def output() -> io.StringIO:
    """Buffer receiving everything the workflow log prints."""
    return io.StringIO()


@pytest.fixture
def log(output: io.StringIO) -> WorkflowCommands:
    """Workflow command sink writing into ``output``."""
    console = Console(file=output, highlight=False, soft_wrap=True, width=200)
    return WorkflowCommands(console, environ={})


@pytest.fixture
def github_client(log: WorkflowCommands) -> Iterator[ClientFactory]:
    """Factory for a GitHubClient backed by a request handler."""
    clients: list[GitHubClient] = []

    def factory(handler: Callable[[httpx.Request], httpx.Response]) -> GitHubClient:
        client = GitHubClient("test-token", api_url=API_URL, log=log, transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield factory

    for client in clients:
        client.close()


@pytest.fixture
def feat_commit() -> Commit:
    return make_commit("feat1234567890", "feat(api): add endpoint")


@pytest.fixture
def fix_commit() -> Commit:
    return make_commit("fix1234567890", "fix: correct typo")


@pytest.fixture
def breaking_commit() -> Commit:
    return make_commit(
        "brk1234567890",
        "feat(core): new config format\n\nBREAKING CHANGE: the old format is no longer read",
    )


@pytest.fixture
def sample_commits() -> list[Commit]:
    """A typical range of commits, oldest first."""
    return [
        make_commit("a000000000", "feat(api): add endpoint"),
        make_commit("b000000000", "fix: correct typo"),
        make_commit("c000000000", "docs: update README"),
        make_commit(
            "d000000000",
            "refactor(core): rework config\n\nBREAKING CHANGE: config keys renamed",
        ),
        make_commit("e000000000", "chore(deps): bump httpx"),
        make_commit("f000000000", "Merge pull request #12 from octo/feature"),
        make_commit("0100000000", "Updated the readme file"),
    ]


UPLOAD_URL = "https://uploads.github.com/repos/octo/widgets/releases/7/assets{?name,label}"


class FakeGitHub:
    """Request handler emulating a repository on GitHub."""

    def __init__(
        self,
        tags: list[str],
        commits: list[dict],
        *,
        release_status: int = 201,
    ) -> None:
        self.tags = tags
        self.commits = commits
        self.release_status = release_status
        self.compare_paths: list[str] = []
        self.releases: list[dict] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path.endswith("/tags"):
            return httpx.Response(200, json=[{"name": name} for name in self.tags])
        if "/git/ref/tags/" in path:
            name = path.split("/git/ref/tags/", 1)[1]
            if name in self.tags:
                return httpx.Response(200, json={"ref": f"refs/tags/{name}", "object": {"sha": "111"}})
            return httpx.Response(404, json={"message": "Not Found"})
        if "/compare/" in path:
            self.compare_paths.append(path)
            return httpx.Response(200, json={"commits": self.commits})
        if path.endswith("/releases") and request.method == "POST":
            if self.release_status >= 400:
                return httpx.Response(self.release_status, json={"message": "Validation Failed"})
            self.releases.append(json.loads(request.content))
            return httpx.Response(201, json={"id": 7, "upload_url": UPLOAD_URL})
        return httpx.Response(404, json={"message": "Not Found"})
