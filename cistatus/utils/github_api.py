"""Minimal GitHub REST helpers built on urllib."""

from __future__ import annotations

import json
import urllib.request
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlparse

API_VERSION = "2022-11-28"
USER_AGENT = "ci-status"


@dataclass
class ApiResponse:
    status: int
    headers: dict[str, str] = field(default_factory=dict)
    body: str = ""


def safe_urlopen(req: urllib.request.Request, timeout: int):
    parsed = urlparse(req.full_url)
    if parsed.scheme != "https":
        raise ValueError(f"Unsupported URL scheme: {parsed.scheme}")
    return urllib.request.urlopen(req, timeout=timeout)  # noqa: S310


def gh_api_post(url: str, token: str, payload: dict[str, Any], timeout: int = 30) -> ApiResponse:
    """POST a JSON payload to the GitHub API.

    HTTP errors are raised as ``urllib.error.HTTPError``; the caller decides
    what a failure means.
    """
    req = urllib.request.Request(  # noqa: S310
        url,
        data=json.dumps(payload).encode("utf-8"),
        method="POST",
        headers={
            "Authorization": f"token {token}",
            "Accept": "application/vnd.github+json",
            "Content-Type": "application/json",
            "X-GitHub-Api-Version": API_VERSION,
            "User-Agent": USER_AGENT,
        },
    )
    with safe_urlopen(req, timeout=timeout) as resp:
        body = resp.read().decode("utf-8")
        return ApiResponse(
            status=getattr(resp, "status", 200),
            headers=dict(resp.headers.items()),
            body=body,
        )
