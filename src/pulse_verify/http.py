from __future__ import annotations

import json
import urllib.error
import urllib.parse
import urllib.request
from typing import Any

from .constants import USER_AGENT


class HttpError(RuntimeError):
    def __init__(self, url: str, status: int | None, body: str = "") -> None:
        self.url = url
        self.status = status
        self.body = body
        detail = f"HTTP {status}" if status is not None else "connection failed"
        super().__init__(f"{detail} for {url}: {body[:200]}" if body else f"{detail} for {url}")


def _urlopen_bytes(req: urllib.request.Request, *, timeout_s: int) -> bytes:
    # Single attempt: resubmission is left to the caller.
    try:
        with urllib.request.urlopen(req, timeout=timeout_s) as resp:
            return resp.read()
    except urllib.error.HTTPError as exc:
        body = exc.read().decode("utf-8", errors="replace")
        raise HttpError(req.full_url, exc.code, body) from exc
    except urllib.error.URLError as exc:
        raise HttpError(req.full_url, None, str(exc.reason)) from exc


def _decode_json(raw: bytes, url: str) -> Any:
    try:
        return json.loads(raw.decode("utf-8"))
    except ValueError as exc:
        raise RuntimeError(f"Failed to decode JSON from {url}: {exc}") from exc


def http_get_json(url: str, timeout_s: int = 30) -> Any:
    req = urllib.request.Request(url, headers={"User-Agent": USER_AGENT})
    return _decode_json(_urlopen_bytes(req, timeout_s=timeout_s), url)


def http_post_form(url: str, fields: dict[str, str], timeout_s: int = 60) -> Any:
    body = urllib.parse.urlencode(fields).encode("utf-8")
    req = urllib.request.Request(
        url,
        data=body,
        headers={
            "User-Agent": USER_AGENT,
            "Content-Type": "application/x-www-form-urlencoded",
        },
        method="POST",
    )
    return _decode_json(_urlopen_bytes(req, timeout_s=timeout_s), url)


def http_post_json(url: str, payload: dict[str, Any], timeout_s: int = 30) -> Any:
    body = json.dumps(payload).encode("utf-8")
    req = urllib.request.Request(
        url,
        data=body,
        headers={
            "User-Agent": USER_AGENT,
            "Content-Type": "application/json",
        },
        method="POST",
    )
    return _decode_json(_urlopen_bytes(req, timeout_s=timeout_s), url)
