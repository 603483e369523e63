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

import dataclasses
import json
import typing

import pydantic

from check_run_cli import exceptions


_BodyModelT = typing.TypeVar("_BodyModelT", bound=pydantic.BaseModel)


class Repository(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(extra="ignore")

    full_name: str | None = None


class CheckSuite(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(extra="ignore")

    head_sha: str | None = None
    head_branch: str | None = None


class CheckRun(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(extra="ignore")

    check_suite: CheckSuite


class CheckRunEvent(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(extra="ignore")

    repository: Repository
    check_run: CheckRun


class CheckSuiteEvent(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(extra="ignore")

    repository: Repository
    check_suite: CheckSuite


class IssueCommentEvent(pydantic.BaseModel):
    # commit and branch are not part of this event
    model_config = pydantic.ConfigDict(extra="ignore")

    repository: Repository


class InboundEvent(pydantic.BaseModel):
    """A webhook delivery as forwarded by the gateway.

    `body` is the untouched GitHub webhook payload; it is only decoded once
    the event type is known. `commit` and `branch` are set by the gateway
    for events that don't carry them, `token` is the installation token.
    """

    model_config = pydantic.ConfigDict(extra="ignore")

    type: str
    body: typing.Any = None
    token: str | None = None
    commit: str | None = None
    branch: str | None = None

    @classmethod
    def from_json(cls, raw: str | bytes) -> InboundEvent:
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise exceptions.PayloadDecodeError(str(e)) from e

        try:
            return cls.model_validate(data)
        except pydantic.ValidationError as e:
            raise exceptions.PayloadDecodeError(str(e)) from e


@dataclasses.dataclass(frozen=True)
class ResourceIdentity:
    repository_full_name: str
    commit_sha: str
    branch: str

    @property
    def owner(self) -> str:
        return self.repository_full_name.split("/")[0]

    @property
    def repo(self) -> str:
        return self.repository_full_name.split("/")[1]

    def as_dict(self) -> dict[str, str]:
        return {
            "repository": self.repository_full_name,
            "commit": self.commit_sha,
            "branch": self.branch,
        }


def _decode_body(
    event_type: str,
    body: typing.Any,  # noqa: ANN401
    model: type[_BodyModelT],
) -> _BodyModelT:
    try:
        return model.model_validate(body)
    except pydantic.ValidationError as e:
        raise exceptions.MalformedBodyError(event_type, str(e)) from e


def _extract(event: InboundEvent) -> tuple[str, str, str]:
    match event.type:
        case "check_run":
            check_run_event = _decode_body(event.type, event.body, CheckRunEvent)
            suite = check_run_event.check_run.check_suite
            return (
                check_run_event.repository.full_name or "",
                suite.head_sha or "",
                suite.head_branch or "",
            )
        case "check_suite":
            check_suite_event = _decode_body(event.type, event.body, CheckSuiteEvent)
            suite = check_suite_event.check_suite
            return (
                check_suite_event.repository.full_name or "",
                suite.head_sha or "",
                suite.head_branch or "",
            )
        case "issue_comment":
            comment_event = _decode_body(event.type, event.body, IssueCommentEvent)
            if not event.commit:
                raise exceptions.MissingOverrideError("commit")
            if not event.branch:
                raise exceptions.MissingOverrideError("branch")
            return (
                comment_event.repository.full_name or "",
                event.commit,
                event.branch,
            )
        case _:
            raise exceptions.UnsupportedEventTypeError(event.type)


def validate_repository(full_name: str) -> str:
    parts = full_name.split("/")
    if len(parts) != 2 or not all(parts):  # noqa: PLR2004
        raise exceptions.InvalidRepositoryFormatError(full_name)
    return full_name


def normalize(event: InboundEvent) -> ResourceIdentity:
    """Extract the repository, commit and branch a check run targets."""
    repository, commit, branch = _extract(event)

    validate_repository(repository)
    if not commit:
        raise exceptions.MissingFieldError("commit")
    if not branch:
        raise exceptions.MissingFieldError("branch")

    return ResourceIdentity(
        repository_full_name=repository,
        commit_sha=commit,
        branch=branch,
    )
