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
import enum
import typing

import pydantic

from check_run_cli import exceptions
from check_run_cli import utils


if typing.TYPE_CHECKING:
    from check_run_cli import events


# Accepted by GitHub today; anything else is still sent as-is.
KNOWN_CONCLUSIONS = frozenset(
    {
        "action_required",
        "cancelled",
        "failure",
        "neutral",
        "skipped",
        "stale",
        "success",
        "timed_out",
    },
)


class CheckRunStatus(enum.StrEnum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Action(pydantic.BaseModel):
    model_config = pydantic.ConfigDict(extra="ignore")

    label: str
    description: str
    identifier: str


_ACTIONS_ADAPTER = pydantic.TypeAdapter(list[Action] | None)


def parse_actions(raw: str | None) -> list[Action]:
    if not raw:
        return []
    try:
        return _ACTIONS_ADAPTER.validate_json(raw) or []
    except pydantic.ValidationError as e:
        raise exceptions.ActionsDecodeError(str(e)) from e


class Output(pydantic.BaseModel):
    title: str
    summary: str
    text: str


class CheckRun(pydantic.BaseModel):
    name: str
    head_branch: str
    head_sha: str
    started_at: str
    external_id: str | None = None
    details_url: str | None = None
    output: Output
    status: CheckRunStatus
    conclusion: str | None = None
    completed_at: str | None = None
    actions: list[Action] | None = None

    @pydantic.model_validator(mode="after")
    def _check_completion_fields(self) -> CheckRun:
        if self.status == CheckRunStatus.COMPLETED:
            if not self.conclusion or not self.completed_at:
                msg = "a completed check run needs a conclusion and a completion time"
                raise ValueError(msg)
        elif self.conclusion is not None or self.completed_at is not None:
            msg = "only a completed check run can have a conclusion or a completion time"
            raise ValueError(msg)
        return self

    def to_payload(self) -> dict[str, typing.Any]:
        return self.model_dump(mode="json", exclude_none=True)


@dataclasses.dataclass(frozen=True)
class RunParams:
    name: str
    title: str
    summary: str = ""
    text: str = ""
    conclusion: str = ""
    external_id: str = ""
    details_url: str = ""
    started_at: str = dataclasses.field(default_factory=utils.now_timestamp)
    actions: tuple[Action, ...] = ()


def build(identity: events.ResourceIdentity, params: RunParams) -> CheckRun:
    """Project the run parameters onto a check run for `identity`.

    A conclusion means the run is over: the check run is marked completed and
    stamped with the current time. Without one it's reported as in progress.
    """
    completion: dict[str, typing.Any] = {"status": CheckRunStatus.IN_PROGRESS}
    if params.conclusion:
        completion = {
            "status": CheckRunStatus.COMPLETED,
            "conclusion": params.conclusion,
            "completed_at": utils.now_timestamp(),
        }

    return CheckRun(
        name=params.name,
        head_branch=identity.branch,
        head_sha=identity.commit_sha,
        started_at=params.started_at,
        external_id=params.external_id or None,
        details_url=params.details_url or None,
        output=Output(
            title=params.title,
            summary=params.summary,
            text=params.text,
        ),
        actions=list(params.actions) or None,
        **completion,
    )
