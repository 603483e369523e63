from __future__ import annotations

import functools
import os
import pathlib
import typing

import click

from check_run_cli import checks
from check_run_cli import exceptions
from check_run_cli import utils


DEFAULT_NAME = "Brigade"
DEFAULT_TITLE = "Running Check"
DEFAULT_TEXT_FILE = "/check-run/text"

F = typing.TypeVar("F", bound=typing.Callable[..., typing.Any])


def read_payload(value: str) -> str:
    """Return the raw payload, reading it from a file when given as `@path`."""
    if not value.startswith("@"):
        return value
    path = pathlib.Path(value[1:])
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        msg = f"can't read {path}: {e.strerror}"
        raise exceptions.PayloadDecodeError(msg) from e


def _empty_envvar_wins(
    ctx: click.Context,
    param: click.Parameter,
    value: str | None,
) -> str | None:
    """Keep a variable that is set but empty instead of the option default.

    click skips empty environment variables, but an empty `CHECK_TEXT` must
    not be replaced by the text file content.
    """
    if (
        param.name is not None
        and isinstance(param.envvar, str)
        and ctx.get_parameter_source(param.name) is click.core.ParameterSource.DEFAULT
        and param.envvar in os.environ
    ):
        return os.environ[param.envvar]
    return value


def payload_option(func: F) -> F:
    return click.option(
        "--payload",
        "-p",
        help="Webhook payload JSON forwarded by the gateway, or @file to read it from a file",
        envvar="CHECK_PAYLOAD",
        required=True,
    )(func)


def github_options(func: F) -> F:
    return click.option(
        "--github-base-url",
        help="Base URL of a GitHub Enterprise server (default: github.com)",
        envvar="GITHUB_BASE_URL",
        default="",
    )(func)


_RUN_OPTIONS = (
    click.option(
        "--name",
        envvar="CHECK_NAME",
        callback=_empty_envvar_wins,
        default=DEFAULT_NAME,
        show_default=True,
        help="Name of the check",
    ),
    click.option(
        "--title",
        envvar="CHECK_TITLE",
        callback=_empty_envvar_wins,
        default=DEFAULT_TITLE,
        show_default=True,
        help="Title of the check output",
    ),
    click.option(
        "--summary",
        envvar="CHECK_SUMMARY",
        default="",
        help="Summary of the check output",
    ),
    click.option(
        "--text",
        envvar="CHECK_TEXT",
        callback=_empty_envvar_wins,
        default=None,
        help="Details of the check output",
    ),
    click.option(
        "--text-file",
        envvar="CHECK_TEXT_FILE",
        default=DEFAULT_TEXT_FILE,
        show_default=True,
        help="File read for the check output details when --text is not set",
    ),
    click.option(
        "--conclusion",
        envvar="CHECK_CONCLUSION",
        default="",
        help="Conclusion of the check; setting it marks the check as completed",
    ),
    click.option(
        "--details-url",
        envvar="CHECK_DETAILS_URL",
        default="",
        help="URL of the full details of the check",
    ),
    click.option(
        "--external-id",
        envvar="CHECK_EXTERNAL_ID",
        default="",
        help="Identifier of the check on the CI side",
    ),
    click.option(
        "--started-at",
        envvar="CHECK_STARTED_AT",
        default=None,
        help="Start time of the check, ISO 8601 (default: now)",
    ),
    click.option(
        "--actions",
        envvar="CHECK_ACTIONS",
        default="",
        help="JSON list of actions ({label, description, identifier}) offered on the check",
    ),
)


def run_options(func: F) -> F:
    return functools.reduce(lambda f, option: option(f), reversed(_RUN_OPTIONS), func)


def load_run_params(  # noqa: PLR0913
    *,
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
) -> checks.RunParams:
    parsed_actions = checks.parse_actions(actions)

    if text is None:
        text = utils.read_text_file(text_file) if text_file else ""

    return checks.RunParams(
        name=name,
        title=title,
        summary=summary,
        text=text,
        conclusion=conclusion,
        external_id=external_id,
        details_url=details_url,
        started_at=started_at or utils.now_timestamp(),
        actions=tuple(parsed_actions),
    )
