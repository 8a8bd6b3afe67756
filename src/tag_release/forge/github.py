"""GitHub REST API client.

A thin synchronous wrapper around httpx covering the four calls a
release needs: listing tags, resolving a ref, comparing two commits and
creating a release. Requests are made one at a time; list endpoints are
paginated by following the ``Link: rel="next"`` header.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, cast

import httpx

from tag_release.actions import WorkflowCommands
from tag_release.config.models import DEFAULT_API_URL
from tag_release.core.commits import Commit
from tag_release.exceptions import GitHubAPIError

if TYPE_CHECKING:
    from collections.abc import Iterator
    from types import TracebackType

    from tag_release.core.release import ReleaseRequest

API_VERSION = "2022-11-28"
PER_PAGE = 100
DEFAULT_TIMEOUT = 30.0


class GitHubClient:
    """Client for the GitHub REST API.

    Args:
        token: Token sent as a bearer credential
        api_url: API root, ``https://api.github.com`` or a GitHub Enterprise URL
        log: Workflow command sink; requests are logged at debug level
        transport: Custom httpx transport (used in tests)
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        token: str,
        *,
        api_url: str = DEFAULT_API_URL,
        log: WorkflowCommands | None = None,
        transport: httpx.BaseTransport | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.log = log or WorkflowCommands()
        self._client = httpx.Client(
            base_url=api_url.rstrip("/"),
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": API_VERSION,
                "User-Agent": "tag-release",
            },
            timeout=timeout,
            transport=transport,
            event_hooks={"request": [self._log_request], "response": [self._log_response]},
        )

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    # -------------------------------------------------------------------------
    # Endpoints
    # -------------------------------------------------------------------------

    def iter_tags(self, owner: str, repo: str) -> Iterator[str]:
        """Yield the name of every tag in the repository.

        Pages are fetched lazily, one request per page.
        """
        for response in self._paginate(f"/repos/{owner}/{repo}/tags", {"per_page": PER_PAGE}):
            try:
                names = [tag["name"] for tag in cast("list[dict[str, Any]]", _json(response))]
            except (KeyError, TypeError) as e:
                raise _malformed(response, e) from e
            yield from names

    def get_ref(self, owner: str, repo: str, ref: str) -> dict[str, Any]:
        """Resolve a reference such as ``tags/v1.0.0``.

        Raises:
            GitHubAPIError: If the reference does not exist
        """
        response = self._request("GET", f"/repos/{owner}/{repo}/git/ref/{ref}")
        return cast("dict[str, Any]", _json(response))

    def compare_commits(self, owner: str, repo: str, base: str, head: str) -> list[Commit]:
        """List the commits reachable from ``head`` but not from ``base``.

        Returns:
            Commits oldest first, as GitHub orders them

        Raises:
            GitHubAPIError: If a request fails or a page is not a comparison
        """
        commits: list[Commit] = []
        url = f"/repos/{owner}/{repo}/compare/{base}...{head}"
        for response in self._paginate(url, {"per_page": PER_PAGE}):
            data = _json(response)
            try:
                page = cast("dict[str, Any]", data).get("commits")
                if page is None:
                    self.log.debug(f"Comparison {base}...{head} returned no commit list")
                    continue
                commits.extend(commit_from_api(item) for item in page)
            except (AttributeError, KeyError, TypeError, ValueError) as e:
                raise _malformed(response, e) from e
        return commits

    def create_release(self, request: ReleaseRequest) -> str:
        """Create a release and return its asset upload URL."""
        response = self._request(
            "POST",
            f"/repos/{request.owner}/{request.repo}/releases",
            json=request.to_payload(),
        )
        data = cast("dict[str, Any]", _json(response))
        return str(data.get("upload_url", ""))

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.RequestError as e:
            raise GitHubAPIError(f"{method} {e.request.url} failed: {e}") from e

        if response.is_error:
            raise GitHubAPIError(
                f"{method} {response.request.url} failed with status "
                f"{response.status_code}: {_error_message(response)}",
                status_code=response.status_code,
            )
        return response

    def _paginate(self, url: str, params: dict[str, Any]) -> Iterator[httpx.Response]:
        next_url: str | None = url
        next_params: dict[str, Any] | None = params
        while next_url:
            response = self._request("GET", next_url, params=next_params)
            yield response
            # The next link already carries the query string
            next_url = response.links.get("next", {}).get("url")
            next_params = None

    def _log_request(self, request: httpx.Request) -> None:
        self.log.debug(f"{request.method} {request.url}")

    def _log_response(self, response: httpx.Response) -> None:
        request = response.request
        remaining = response.headers.get("x-ratelimit-remaining")
        suffix = f" (rate limit remaining: {remaining})" if remaining is not None else ""
        self.log.debug(f"{request.method} {request.url} -> {response.status_code}{suffix}")


def commit_from_api(data: dict[str, Any]) -> Commit:
    """Build a Commit from a GitHub commit object."""
    details = data.get("commit") or {}
    author = details.get("author") or {}
    date = author.get("date")
    return Commit(
        sha=data["sha"],
        message=details.get("message", ""),
        author_name=author.get("name", ""),
        author_email=author.get("email", ""),
        date=datetime.fromisoformat(date) if date else None,
        html_url=data.get("html_url", ""),
    )


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.reason_phrase


def _json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError as e:
        raise _malformed(response, e) from e


def _malformed(response: httpx.Response, error: Exception) -> GitHubAPIError:
    request = response.request
    return GitHubAPIError(
        f"{request.method} {request.url} returned an unexpected body: {error!r}",
        status_code=response.status_code,
    )
