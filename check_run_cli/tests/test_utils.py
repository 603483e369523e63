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

import datetime
import pathlib
from unittest import mock

import pytest

from check_run_cli import exceptions
from check_run_cli import utils


@pytest.mark.parametrize(
    ("base_url", "expected"),
    [
        ("", "https://api.github.com"),
        (None, "https://api.github.com"),
        ("https://api.github.com", "https://api.github.com"),
        ("https://github.example.com", "https://github.example.com/api/v3"),
        ("https://github.example.com/", "https://github.example.com/api/v3"),
        ("https://github.example.com/api/v3", "https://github.example.com/api/v3"),
        ("https://github.example.com/api/v3/", "https://github.example.com/api/v3"),
    ],
)
def test_get_github_api_url(base_url: str | None, expected: str) -> None:
    assert utils.get_github_api_url(base_url) == expected


def test_get_github_http_client() -> None:
    client = utils.get_github_http_client("https://api.github.com", "ghs_token")
    assert client.headers["Authorization"] == "token ghs_token"
    assert client.headers["Accept"] == "application/vnd.github.v3+json"
    assert client.headers["User-Agent"].startswith("check_run_cli/")
    assert client.base_url == "https://api.github.com"


@pytest.mark.parametrize("token", ["", None])
def test_get_github_http_client_without_token(token: str | None) -> None:
    with pytest.raises(exceptions.ChannelConstructionError, match="token"):
        utils.get_github_http_client("https://api.github.com", token)


@pytest.mark.parametrize(
    "github_server",
    ["not a url", "ftp://github.example.com", "https://"],
)
def test_get_github_http_client_invalid_url(github_server: str) -> None:
    with pytest.raises(exceptions.ChannelConstructionError, match="invalid GitHub API URL"):
        utils.get_github_http_client(github_server, "ghs_token")


def test_get_github_http_client_debug_hooks() -> None:
    utils.set_debug(True)
    client = utils.get_github_http_client("https://api.github.com", "ghs_token")
    assert client.event_hooks["request"] == [utils.log_httpx_request]
    assert client.event_hooks["response"] == [utils.log_httpx_response]


def test_now_timestamp() -> None:
    now = datetime.datetime(2026, 10, 18, 9, 30, 12, 345678, tzinfo=datetime.UTC)
    with mock.patch.object(utils, "utcnow", return_value=now):
        assert utils.now_timestamp() == "2026-10-18T09:30:12+00:00"


def test_read_text_file(tmp_path: pathlib.Path) -> None:
    text_file = tmp_path / "text"
    text_file.write_text("# Results\n\nAll good", encoding="utf-8")

    assert utils.read_text_file(text_file) == "# Results\n\nAll good"
    assert utils.read_text_file(tmp_path / "missing") == ""
    assert utils.read_text_file(tmp_path) == ""
