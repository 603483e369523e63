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
import json
import os
import pathlib
import typing

import pytest

from check_run_cli import utils


FIXTURES = pathlib.Path(__file__).parent


@pytest.fixture(autouse=True)
def _unset_check_environment(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    # The CI running the tests may itself export some of these
    for key in list(os.environ):
        if key.startswith("CHECK_") or key == "GITHUB_BASE_URL":
            monkeypatch.delenv(key)


@pytest.fixture(autouse=True)
def _change_working_directory(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: pathlib.Path,
) -> None:
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def _reset_debug() -> typing.Generator[None, None, None]:
    yield
    utils.set_debug(False)


def load_event(name: str) -> dict[str, typing.Any]:
    return json.loads((FIXTURES / f"{name}_event.json").read_bytes())  # type: ignore[no-any-return]


@pytest.fixture
def check_suite_body() -> dict[str, typing.Any]:
    return load_event("check_suite")


@pytest.fixture
def check_run_body() -> dict[str, typing.Any]:
    return load_event("check_run")


@pytest.fixture
def issue_comment_body() -> dict[str, typing.Any]:
    return load_event("issue_comment")
