#
#  Copyright © 2021-2024 Mergify SAS
#
# Licensed under the Apache License, Version 2.0 (the "License"); you may
# not use this file except in compliance with the License. You may obtain
# a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS, WITHOUT
# WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied. See the
# License for the specific language governing permissions and limitations
# under the License.

from __future__ import annotations

import asyncio
import datetime
import functools
import pathlib
import typing

import httpx

from check_run_cli import VERSION
from check_run_cli import console
from check_run_cli import exceptions


GITHUB_API_URL = "https://api.github.com"
ENTERPRISE_API_PATH = "/api/v3"

_DEBUG = False


def set_debug(debug: bool) -> None:
    global _DEBUG  # noqa: PLW0603
    _DEBUG = debug


def is_debug() -> bool:
    return _DEBUG


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(tz=datetime.UTC)


def format_timestamp(value: datetime.datetime) -> str:
    return value.isoformat(timespec="seconds")


def now_timestamp() -> str:
    return format_timestamp(utcnow())


def read_text_file(path: str | pathlib.Path) -> str:
    """Return the content of `path`, or an empty string if it can't be read."""
    try:
        return pathlib.Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return ""


def get_github_api_url(base_url: str | None) -> str:
    """Resolve the REST API root for github.com or a GitHub Enterprise host."""
    if not base_url:
        return GITHUB_API_URL

    base_url = base_url.rstrip("/")
    if base_url.endswith(ENTERPRISE_API_PATH) or base_url == GITHUB_API_URL:
        return base_url
    return f"{base_url}{ENTERPRISE_API_PATH}"


# NOTE: must be async for httpx
async def log_httpx_request(request: httpx.Request) -> None:  # noqa: RUF029
    console.print(
        f"[purple]DEBUG: request: {request.method} {request.url} - Waiting for response[/]",
    )


# NOTE: must be async for httpx
async def log_httpx_response(response: httpx.Response) -> None:
    request = response.request
    await response.aread()
    elapsed = response.elapsed.total_seconds()
    console.print(
        f"[purple]DEBUG: response: {request.method} {request.url} - Status {response.status_code} - Elasped {elapsed} s[/]",
    )


def get_github_http_client(github_server: str, token: str | None) -> httpx.AsyncClient:
    if not token:
        msg = "no installation token found in payload"
        raise exceptions.ChannelConstructionError(msg)

    try:
        url = httpx.URL(github_server)
    except httpx.InvalidURL as e:
        msg = f"invalid GitHub API URL {github_server!r}: {e}"
        raise exceptions.ChannelConstructionError(msg) from e
    if url.scheme not in {"http", "https"} or not url.host:
        msg = f"invalid GitHub API URL {github_server!r}"
        raise exceptions.ChannelConstructionError(msg)

    event_hooks: typing.Mapping[str, list[typing.Callable[..., typing.Any]]] = {
        "request": [],
        "response": [],
    }
    if is_debug():
        event_hooks["request"].insert(0, log_httpx_request)
        event_hooks["response"].insert(0, log_httpx_response)

    return httpx.AsyncClient(
        base_url=url,
        headers={
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": f"check_run_cli/{VERSION}",
            "Authorization": f"token {token}",
        },
        event_hooks=event_hooks,
        follow_redirects=True,
        timeout=10.0,
    )


P = typing.ParamSpec("P")
R = typing.TypeVar("R")


def run_with_asyncio(
    func: typing.Callable[
        P,
        typing.Coroutine[typing.Any, typing.Any, R],
    ],
) -> functools._Wrapped[
    P,
    typing.Coroutine[typing.Any, typing.Any, R],
    P,
    R,
]:
    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        result = func(*args, **kwargs)
        return asyncio.run(result)

    return wrapper
