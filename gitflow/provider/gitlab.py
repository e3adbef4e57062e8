"""GitLab REST API provider.

Only repository metadata and releases are supported; merge requests are
reported as not implemented.
"""

from __future__ import annotations

from urllib.parse import quote

from gitflow.core.result import Err, Ok, Result
from gitflow.core.structured import StrDict, as_str_dict, get_str, get_table
from gitflow.provider.http import HttpClient
from gitflow.provider.models import (
    CreatePROptions,
    ProviderError,
    PullRequest,
    Release,
    http_to_provider_error,
)

__all__ = ["GITLAB_API_URL", "GitLabProvider"]

GITLAB_API_URL = "https://gitlab.com/api/v4"


def _not_implemented() -> ProviderError:
    return ProviderError(
        kind="not_implemented",
        message="gitlab pull requests not implemented",
        hint="use the GitLab web UI for merge requests",
    )


class GitLabProvider:
    name = "gitlab"

    def __init__(
        self,
        *,
        token: str,
        owner: str,
        repo: str,
        http: HttpClient,
        base_url: str = "",
    ) -> None:
        self.base_url = (base_url.strip() or GITLAB_API_URL).rstrip("/")
        project = owner.strip()
        if repo.strip():
            project = f"{owner.strip()}/{repo.strip()}"
        self.project = quote(project, safe="")
        self._token = token
        self._http = http

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

    def create_pr(self, options: CreatePROptions) -> Result[PullRequest, ProviderError]:
        return Err(_not_implemented())

    def get_pr(self, number: int) -> Result[PullRequest, ProviderError]:
        return Err(_not_implemented())

    def list_prs(self, state: str = "open") -> Result[list[PullRequest], ProviderError]:
        return Err(_not_implemented())

    def create_release(self, tag: str, name: str, body: str) -> Result[Release, ProviderError]:
        payload = {"tag_name": tag, "name": name, "description": body}
        result = self._http.request_json("POST", self._url("/releases"), self._headers(), payload)
        if isinstance(result, Err):
            if "already exists" in result.error.message:
                return Err(
                    ProviderError(
                        kind="release_exists",
                        message=f"release already exists for tag {tag}",
                        status=result.error.status,
                    )
                )
            return Err(http_to_provider_error(result.error, "gitlab"))
        return Ok(_parse_release(as_str_dict(result.value) or {}, tag, name))

    def update_release(self, tag: str, name: str, body: str) -> Result[Release, ProviderError]:
        payload = {"name": name, "description": body}
        result = self._request_object("PUT", f"/releases/{quote(tag, safe='')}", payload)
        if isinstance(result, Err):
            return result
        return Ok(_parse_release(result.value, tag, name))

    def _url(self, path: str) -> str:
        return f"{self.base_url}/projects/{self.project}{path}"

    def _headers(self) -> dict[str, str]:
        return {"PRIVATE-TOKEN": self._token}

    def _request_object(
        self, method: str, path: str, body: object | None = None
    ) -> Result[StrDict, ProviderError]:
        result = self._http.request_json(method, self._url(path), self._headers(), body)
        if isinstance(result, Err):
            return Err(http_to_provider_error(result.error, "gitlab"))
        data = as_str_dict(result.value)
        if data is None:
            return Err(ProviderError(kind="decode", message="expected a JSON object"))
        return Ok(data)


def _parse_release(data: StrDict, tag: str, name: str) -> Release:
    links = get_table(data, "_links") or {}
    return Release(
        tag=get_str(data, "tag_name") or tag,
        name=get_str(data, "name") or name,
        url=get_str(links, "self") or "",
    )
