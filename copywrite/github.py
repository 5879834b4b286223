# Copyright (C) 2026 Copywrite Authors
# SPDX-License-Identifier: AGPL-3.0-or-later
"""Small GitHub REST client used to infer a repository's first copyright year."""

from __future__ import annotations

import logging
import re
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, NamedTuple, Optional, Union

from requests import HTTPError, RequestException, Response, Session
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .errors import GitHubError
from .gitmeta import GitRunner, run_git

logger = logging.getLogger(__name__)

_REMOTE_PATTERNS = (
    re.compile(r"^git@github\.com:(?P<owner>[^/]+)/(?P<name>[^/]+?)(?:\.git)?/?$"),
    re.compile(r"^(?:https?|ssh|git)://(?:[^@/]+@)?github\.com(?::\d+)?/(?P<owner>[^/]+)/(?P<name>[^/]+?)(?:\.git)?/?$"),
)


class GHRepo(NamedTuple):
    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


def parse_remote(url: str) -> Optional[GHRepo]:
    url = url.strip()
    for pattern in _REMOTE_PATTERNS:
        match = pattern.match(url)
        if match:
            return GHRepo(match.group("owner"), match.group("name"))
    return None


def discover_repo(path: Union[str, Path] = ".", runner: Optional[GitRunner] = None) -> GHRepo:
    """GitHub owner and name behind the ``origin`` remote of the checkout at ``path``."""
    run = runner or run_git
    output = run(["remote", "get-url", "origin"], str(path))
    if not output:
        raise GitHubError(
            "unable to determine if the current directory relates to a GitHub repo: no origin remote"
        )
    repo = parse_remote(output)
    if repo is None:
        raise GitHubError(f"origin remote is not a GitHub repository: {output.strip()}")
    return repo


def http_client(timeout: int = 15) -> Session:
    session = Session()
    retry = Retry(total=3, backoff_factor=0.5, status_forcelist=[429, 500, 502, 503, 504])
    session.mount("https://", HTTPAdapter(max_retries=retry))
    original = session.request

    def _request(method, url, **kwargs):
        if "timeout" not in kwargs:
            kwargs["timeout"] = timeout
        return original(method, url, **kwargs)

    session.request = _request
    return session


class GitHubClient:
    API_BASE = "https://api.github.com"

    def __init__(
        self,
        token: Optional[str] = None,
        *,
        session: Optional[Session] = None,
        timeout: int = 15,
    ) -> None:
        self.token = token
        self.timeout = timeout
        self.session = session or http_client(timeout)

    def get_repo(self, repo: GHRepo) -> Dict[str, Any]:
        return self._request("GET", f"/repos/{repo.owner}/{repo.name}")

    def repo_creation_year(self, repo: GHRepo) -> int:
        data = self.get_repo(repo)
        created = data.get("created_at") or ""
        try:
            year = datetime.fromisoformat(created.replace("Z", "+00:00")).year
        except ValueError:
            raise GitHubError(f"year returned from GitHub API is invalid {created!r}") from None
        return year

    def _request(self, method: str, path: str) -> Dict[str, Any]:
        url = f"{self.API_BASE}{path}"
        headers = {"Accept": "application/vnd.github+json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        start = time.perf_counter()
        logger.debug("→ GitHub %s %s", method, path)
        try:
            response = self.session.request(method, url, headers=headers, timeout=self.timeout)
            response.raise_for_status()
        except HTTPError as exc:
            raise self._convert_http_error(exc.response) from None
        except RequestException as exc:
            raise GitHubError(f"GitHub request failed: {exc}") from None
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.debug("← GitHub %s %s [%s] in %.0f ms", method, path, response.status_code, elapsed_ms)
        try:
            return response.json()
        except ValueError:
            raise GitHubError(f"GitHub returned a non-JSON body for {path}") from None

    @staticmethod
    def _convert_http_error(response: Optional[Response]) -> GitHubError:
        status = response.status_code if response is not None else 0
        message = (response.reason if response is not None else None) or "HTTP error"
        if response is not None:
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict) and body.get("message"):
                message = body["message"]
        return GitHubError(f"GitHub API error {status}: {message}", status=status)
