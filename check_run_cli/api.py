from __future__ import annotations

import typing

import httpx

from check_run_cli import exceptions


if typing.TYPE_CHECKING:
    from check_run_cli import checks
    from check_run_cli import events


# The check-runs API is gated behind this preview media type.
CHECKS_PREVIEW_ACCEPT = "application/vnd.github.antiope-preview+json"


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.reason_phrase

    if not isinstance(data, dict):
        return response.reason_phrase

    message = str(data.get("message") or response.reason_phrase)
    errors = data.get("errors")
    if isinstance(errors, list) and errors:
        details = ", ".join(
            str(e.get("message") or e) if isinstance(e, dict) else str(e)
            for e in errors
        )
        message = f"{message} ({details})"
    return message


async def create_check_run(
    client: httpx.AsyncClient,
    identity: events.ResourceIdentity,
    run: checks.CheckRun,
) -> str:
    """Create `run` on the repository and return the raw response body."""
    try:
        response = await client.post(
            f"/repos/{identity.owner}/{identity.repo}/check-runs",
            json=run.to_payload(),
            headers={"Accept": CHECKS_PREVIEW_ACCEPT},
        )
    except httpx.HTTPError as e:
        raise exceptions.SubmissionError(str(e) or type(e).__name__) from e

    if response.is_error:
        raise exceptions.SubmissionError(
            _error_message(response),
            body=response.text,
            status_code=response.status_code,
        )

    return response.text
