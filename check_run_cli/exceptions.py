from __future__ import annotations

import dataclasses
import enum


class ExitCode(enum.IntEnum):
    SUCCESS = 0
    SUBMISSION_FAILED = 1
    # 2 is click's usage error
    CHANNEL_FAILED = 3
    NORMALIZATION_FAILED = 4
    INVALID_REPOSITORY = 5
    INVALID_PAYLOAD = 6
    INVALID_ACTIONS = 7


class CheckRunError(Exception):
    exit_code: ExitCode = ExitCode.SUBMISSION_FAILED


class DecodeError(CheckRunError):
    pass


class PayloadDecodeError(DecodeError):
    exit_code = ExitCode.INVALID_PAYLOAD

    def __init__(self, reason: str) -> None:
        super().__init__(f"could not parse payload: {reason}")


class ActionsDecodeError(DecodeError):
    exit_code = ExitCode.INVALID_ACTIONS

    def __init__(self, reason: str) -> None:
        super().__init__(f"could not parse actions: {reason}")


class NormalizationError(CheckRunError):
    exit_code = ExitCode.NORMALIZATION_FAILED


class UnsupportedEventTypeError(NormalizationError):
    def __init__(self, event_type: str) -> None:
        self.event_type = event_type
        super().__init__(f"unknown payload type {event_type!r}")


class MalformedBodyError(NormalizationError):
    def __init__(self, event_type: str, diagnostic: str) -> None:
        self.event_type = event_type
        self.diagnostic = diagnostic
        super().__init__(
            f"body does not match a {event_type!r} event: {diagnostic}",
        )


class MissingOverrideError(NormalizationError):
    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(
            f"{field} empty: an issue_comment payload must carry its {field} explicitly",
        )


class MissingFieldError(NormalizationError):
    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"{field} is missing from the event body")


class InvalidRepositoryFormatError(NormalizationError):
    exit_code = ExitCode.INVALID_REPOSITORY

    def __init__(self, repository: str) -> None:
        self.repository = repository
        super().__init__(
            f"repository full name must be <owner>/<name>, got {repository!r}",
        )


class ChannelConstructionError(CheckRunError):
    exit_code = ExitCode.CHANNEL_FAILED


@dataclasses.dataclass
class SubmissionError(CheckRunError):
    message: str
    body: str = ""
    status_code: int | None = None

    exit_code = ExitCode.SUBMISSION_FAILED

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"HTTPError {self.status_code}: {self.message}"
