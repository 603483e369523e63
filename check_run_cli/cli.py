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

import json
import typing

import click
import click_default_group

from check_run_cli import VERSION
from check_run_cli import api
from check_run_cli import checks
from check_run_cli import config
from check_run_cli import console
from check_run_cli import events
from check_run_cli import exceptions
from check_run_cli import utils


class CheckRunFailedError(click.ClickException):
    def __init__(self, error: exceptions.CheckRunError) -> None:
        message = str(error)
        if isinstance(error, exceptions.SubmissionError):
            message = f"{message} (got {error.body})"
        super().__init__(message)
        self.exit_code = int(error.exit_code)

    def show(self, file: typing.IO[typing.Any] | None = None) -> None:  # noqa: ARG002
        console.print(
            f"Error: {self.format_message()}",
            style="red",
            markup=False,
            highlight=False,
            soft_wrap=True,
        )


def _warn_on_unknown_conclusion(conclusion: str) -> None:
    if conclusion and conclusion not in checks.KNOWN_CONCLUSIONS:
        click.echo(
            f"WARNING: conclusion {conclusion!r} is not one GitHub is known to accept, sending it anyway",
            err=True,
        )


async def submit(
    *,
    raw_payload: str,
    params: checks.RunParams,
    github_base_url: str,
) -> str:
    event = events.InboundEvent.from_json(config.read_payload(raw_payload))
    identity = events.normalize(event)
    if utils.is_debug():
        console.print(
            f"[purple]DEBUG: {event.type} event for {identity.repository_full_name}"
            f"@{identity.commit_sha} ({identity.branch})[/]",
        )

    check_run = checks.build(identity, params)
    _warn_on_unknown_conclusion(params.conclusion)

    api_url = utils.get_github_api_url(github_base_url)
    async with utils.get_github_http_client(api_url, event.token) as client:
        return await api.create_check_run(client, identity, check_run)


@click.group(
    cls=click_default_group.DefaultGroup,
    default="run",
    default_if_no_args=True,
)
@click.option("--debug", is_flag=True, default=False, help="debug mode")
@click.version_option(VERSION)
def cli(debug: bool) -> None:
    utils.set_debug(debug)


@cli.command(help="Create a check run on GitHub from a webhook payload")
@config.payload_option
@config.run_options
@config.github_options
def run(  # noqa: PLR0913
    *,
    payload: str,
    name: str,
    title: str,
    summary: str,
    text: str | None,
    text_file: str,
    conclusion: str,
    details_url: str,
    external_id: str,
    started_at: str | None,
    actions: str,
    github_base_url: str,
) -> None:
    try:
        params = config.load_run_params(
            name=name,
            title=title,
            summary=summary,
            text=text,
            text_file=text_file,
            conclusion=conclusion,
            details_url=details_url,
            external_id=external_id,
            started_at=started_at,
            actions=actions,
        )
        out = utils.run_with_asyncio(submit)(
            raw_payload=payload,
            params=params,
            github_base_url=github_base_url,
        )
    except exceptions.CheckRunError as e:
        raise CheckRunFailedError(e) from e

    click.echo(out)


@cli.command(help="Print the repository, commit and branch targeted by a webhook payload")
@config.payload_option
def identity(*, payload: str) -> None:
    try:
        event = events.InboundEvent.from_json(config.read_payload(payload))
        resource = events.normalize(event)
    except exceptions.CheckRunError as e:
        raise CheckRunFailedError(e) from e

    click.echo(json.dumps(resource.as_dict(), indent=2))


def main() -> None:
    cli()
