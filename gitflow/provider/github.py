"""GitHub REST API provider."""

from __future__ import annotations

from typing import cast

from gitflow.core.result import Err, Ok, Result
from gitflow.core.structured import StrDict, as_str_dict, get_bool, get_int, get_str, get_table
from gitflow.provider.http import HttpClient, HttpError
from gitflow.provider.models import (
    CreatePROptions,
    ProviderError,
    PullRequest,
    Release,
    http_to_provider_error,
)

__all__ = ["GITHUB_API_URL", "GitHubProvider"]

GITHUB_API_URL = "https://api.github.com"


def _is_exists_error(error: HttpError) -> bool:
    return "already_exists" in error.message or "already exists" in error.message


class GitHubProvider:
    """Pull requests and releases for one GitHub repository."""

    name = "github"

    def __init__(
        self,
        *,
        token: str,
        owner: str,
        repo: str,
        http: HttpClient,
        base_url: str = "",
    ) -> None:
        self.base_url = (base_url.strip() or GITHUB_API_URL).rstrip("/")
        self.owner = owner
        self.repo = repo
        self._token = token
        self._http = http

    # -------------------------------------------------------------------------
    # Repository
    # -------------------------------------------------------------------------

    def validate_auth(self) -> Result[None, ProviderError]:
        return self._request_object("GET", "").map(lambda _: None)

    def get_default_branch(self) -> Result[str, ProviderError]:
        result = self._request_object("GET", "")
        if isinstance(result, Err):
            return result
        branch = get_str(result.value, "default_branch")
        if not branch:
            return Err(ProviderError(kind="decode", message="default branch missing in response"))
        return Ok(branch)

    # -------------------------------------------------------------------------
    # Pull requests
    # -------------------------------------------------------------------------

    def create_pr(self, options: CreatePROptions) -> Result[PullRequest, ProviderError]:
        payload = {
            "title": options.title,
            "head": options.head_branch,
            "base": options.base_branch,
            "body": options.description,
            "draft": options.draft,
        }
        created = self._request_object("POST", "/pulls", payload)
        if isinstance(created, Err):
            return created

        pr = _parse_pr(created.value)
        if options.reviewers:
            reviewers = self._request(
                "POST",
                f"/pulls/{pr.number}/requested_reviewers",
                {"reviewers": list(options.reviewers)},
            )
            if isinstance(reviewers, Err):
                return reviewers
        if options.labels:
            labels = self._request(
                "POST",
                f"/issues/{pr.number}/labels",
                {"labels": list(options.labels)},
            )
            if isinstance(labels, Err):
                return labels

        return Ok(
            PullRequest(
                number=pr.number,
                title=pr.title,
                state=pr.state,
                description=pr.description,
                author=pr.author,
                head_branch=pr.head_branch,
                base_branch=pr.base_branch,
                url=pr.url,
                draft=pr.draft,
                reviewers=options.reviewers,
                labels=options.labels,
            )
        )

    def get_pr(self, number: int) -> Result[PullRequest, ProviderError]:
        return self._request_object("GET", f"/pulls/{number}").map(_parse_pr)

    def list_prs(self, state: str = "open") -> Result[list[PullRequest], ProviderError]:
        result = self._request("GET", f"/pulls?state={state or 'open'}")
        if isinstance(result, Err):
            return result
        if not isinstance(result.value, list):
            return Err(ProviderError(kind="decode", message="expected a JSON array of pull requests"))
        items = cast(list[object], result.value)
        return Ok([_parse_pr(d) for d in (as_str_dict(item) for item in items) if d is not None])

    # -------------------------------------------------------------------------
    # Releases
    # -------------------------------------------------------------------------

    def create_release(self, tag: str, name: str, body: str) -> Result[Release, ProviderError]:
        payload = {"tag_name": tag, "name": name, "body": body}
        result = self._http.request_json("POST", self._url("/releases"), self._headers(), payload)
        if isinstance(result, Err):
            if _is_exists_error(result.error):
                return Err(
                    ProviderError(
                        kind="release_exists",
                        message=f"release already exists for tag {tag}",
                        status=result.error.status,
                    )
                )
            return Err(http_to_provider_error(result.error, "github"))
        data = as_str_dict(result.value) or {}
        return Ok(_parse_release(data, tag, name))

    def update_release(self, tag: str, name: str, body: str) -> Result[Release, ProviderError]:
        existing = self._request_object("GET", f"/releases/tags/{tag}")
        if isinstance(existing, Err):
            return existing
        release_id = get_int(existing.value, "id")
        if not release_id:
            return Err(ProviderError(kind="api", message=f"release not found for tag {tag}"))

        payload = {"tag_name": tag, "name": name, "body": body}
        updated = self._request_object("PATCH", f"/releases/{release_id}", payload)
        if isinstance(updated, Err):
            return updated
        return Ok(_parse_release(updated.value, tag, name))

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    def _url(self, path: str) -> str:
        return f"{self.base_url}/repos/{self.owner}/{self.repo}{path}"

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._token}",
            "Accept": "application/vnd.github+json",
        }

    def _request(
        self, method: str, path: str, body: object | None = None
    ) -> Result[object, ProviderError]:
        result = self._http.request_json(method, self._url(path), self._headers(), body)
        return result.map_err(lambda e: http_to_provider_error(e, "github"))

    def _request_object(
        self, method: str, path: str, body: object | None = None
    ) -> Result[StrDict, ProviderError]:
        result = self._request(method, path, body)
        if isinstance(result, Err):
            return result
        data = as_str_dict(result.value)
        if data is None:
            return Err(ProviderError(kind="decode", message="expected a JSON object"))
        return Ok(data)


def _branch_ref(data: StrDict, key: str) -> str:
    ref = get_table(data, key) or {}
    return get_str(ref, "ref") or ""


def _parse_pr(data: StrDict) -> PullRequest:
    user = get_table(data, "user") or {}
    return PullRequest(
        number=get_int(data, "number") or 0,
        title=get_str(data, "title") or "",
        state=get_str(data, "state") or "",
        description=get_str(data, "body") or "",
        author=get_str(user, "login") or "",
        head_branch=_branch_ref(data, "head"),
        base_branch=_branch_ref(data, "base"),
        url=get_str(data, "html_url") or "",
        draft=get_bool(data, "draft") or False,
    )


def _parse_release(data: StrDict, tag: str, name: str) -> Release:
    return Release(
        tag=get_str(data, "tag_name") or tag,
        name=get_str(data, "name") or name,
        url=get_str(data, "html_url") or "",
    )
