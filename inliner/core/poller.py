"""Polling state machine for asynchronous generation/edit jobs.

Architectural role:
    Converts a fire-and-forget server-side job into a synchronous result by
    repeatedly checking the job-status endpoint and the CDN for `content_path`.

Processing flow (per attempt):
    1. `GET content/request-json/{content_path}`. A decodable `mediaAsset.data`
       payload is wrapped and returned immediately.
    2. Otherwise `GET {image_url}/{content_path}`. This also runs when the
       status request failed or its payload was undecodable. HTTP 200 means
       the CDN already serves the asset and its body is the result.
    3. The attempt resolves to one `PollOutcome`: `Ready`, `Pending`,
       `TransientFailure` or `FatalFailure`.

Retry policy:
    `max_attempts = floor(max_seconds / 3)` with a fixed 3 second wait between
    attempts and none after the last. Transient failures (network errors,
    unexpected statuses, malformed JSON, undecodable payloads) never abort
    the loop; they are logged and the budget keeps counting down. A sustained
    outage therefore ends as `InlinerTimeoutError`, with the last swallowed
    cause attached for diagnosis.

Terminal states:
    - Ready -> `GenerationResult` returned.
    - TimedOut -> `InlinerTimeoutError`.
    - Fatal -> `PollCancelledError` once the cancellation signal fires.

Determinism:
    The wait function is injected so tests drive the loop without sleeping.
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Union

from inliner.errors import InlinerError, InlinerTimeoutError, PollCancelledError
from inliner.models import GenerationResult
from inliner.core.results import inline_payload, wrap_result
from inliner.transport.api import AsyncInlinerApi, InlinerApi
from inliner.transport.base import TransportResponse

logger = logging.getLogger(__name__)

POLL_INTERVAL_SECONDS = 3
STATUS_ENDPOINT = "content/request-json/"
# CDN statuses meaning "not published yet" rather than a failure.
_CDN_PENDING_STATUSES = (202, 404)


@dataclass(frozen=True)
class Ready:
    result: GenerationResult


@dataclass(frozen=True)
class Pending:
    pass


@dataclass(frozen=True)
class TransientFailure:
    cause: BaseException


@dataclass(frozen=True)
class FatalFailure:
    cause: BaseException


PollOutcome = Union[Ready, Pending, TransientFailure, FatalFailure]


def attempt_budget(max_seconds: float) -> int:
    return max(0, int(max_seconds // POLL_INTERVAL_SECONDS))


def status_outcome(data: dict, content_path: str, image_url: str) -> Ready | None:
    """Outcome of a job-status response, or `None` when the job is still running.

    Raises:
        DecodeError: The reported payload is not valid base64.
    """
    payload = inline_payload(data)
    if payload is None:
        return None
    return Ready(wrap_result(payload, content_path, image_url))


def asset_outcome(response: TransportResponse, content_path: str, asset_url: str) -> PollOutcome:
    """Outcome of a direct CDN fetch."""
    if response.status == 200:
        return Ready(GenerationResult(data=response.body, url=asset_url, content_path=content_path))
    if response.status in _CDN_PENDING_STATUSES:
        return Pending()
    return TransientFailure(
        InlinerError(f"Unexpected CDN status {response.status} for {content_path}")
    )


def combine_outcomes(status_error: BaseException | None, cdn: PollOutcome) -> PollOutcome:
    """Merge a failed status check with the CDN result of the same attempt."""
    if isinstance(cdn, Pending) and status_error is not None:
        return TransientFailure(status_error)
    return cdn


def _wait(seconds: float, cancel: threading.Event | None) -> bool:
    if cancel is None:
        time.sleep(seconds)
        return False
    return cancel.wait(seconds)


async def _async_wait(seconds: float, cancel: asyncio.Event | None) -> bool:
    if cancel is None:
        await asyncio.sleep(seconds)
        return False
    try:
        await asyncio.wait_for(cancel.wait(), timeout=seconds)
    except asyncio.TimeoutError:
        return False
    return True


def _log_outcome(outcome: PollOutcome, label: str, content_path: str, attempt: int, total: int) -> None:
    if isinstance(outcome, TransientFailure):
        logger.warning(
            "%s %s: attempt %d/%d failed: %s", label, content_path, attempt, total, outcome.cause
        )
    elif isinstance(outcome, Pending):
        logger.debug("%s %s: attempt %d/%d pending", label, content_path, attempt, total)


class Poller:
    """Blocking poll loop.

    Args:
        api: REST helper used for status and CDN checks.
        wait: `wait(seconds, cancel) -> cancelled` used between attempts.
    """

    def __init__(
        self,
        api: InlinerApi,
        wait: Callable[[float, threading.Event | None], bool] = _wait,
    ) -> None:
        self.api = api
        self.wait = wait

    def check(self, content_path: str) -> PollOutcome:
        """Run a single attempt and classify it."""
        status_error = None
        try:
            data = self.api.fetch("GET", STATUS_ENDPOINT + content_path)
            outcome = status_outcome(data, content_path, self.api.config.image_url)
        except InlinerError as exc:
            status_error = exc
        else:
            if outcome is not None:
                return outcome

        try:
            response = self.api.fetch_asset(content_path)
        except InlinerError as exc:
            return TransientFailure(exc)
        cdn = asset_outcome(response, content_path, self.api.asset_url(content_path))
        return combine_outcomes(status_error, cdn)

    def poll(
        self,
        content_path: str,
        label: str,
        max_seconds: float = 180,
        cancel: threading.Event | None = None,
    ) -> GenerationResult:
        """Poll until ready, timed out, cancelled or fatally failed.

        Args:
            content_path: Asset key to poll.
            label: Job-kind annotation used only in messages.
            max_seconds: Polling budget.
            cancel: Optional event; setting it aborts the poll.

        Raises:
            InlinerTimeoutError: Budget exhausted.
            PollCancelledError: `cancel` was set.
        """
        total = attempt_budget(max_seconds)
        last_error = None
        cancelled = cancel is not None and cancel.is_set()

        for attempt in range(1, total + 1):
            if cancelled:
                outcome = FatalFailure(PollCancelledError(label, content_path))
            else:
                outcome = self.check(content_path)
            if isinstance(outcome, Ready):
                logger.info("%s %s: ready after %d attempt(s)", label, content_path, attempt)
                return outcome.result
            if isinstance(outcome, FatalFailure):
                raise outcome.cause
            if isinstance(outcome, TransientFailure):
                last_error = outcome.cause
            _log_outcome(outcome, label, content_path, attempt, total)

            if attempt < total:
                cancelled = self.wait(POLL_INTERVAL_SECONDS, cancel)

        raise InlinerTimeoutError(label, max_seconds, attempts=total, last_error=last_error)


class AsyncPoller:
    """Asyncio poll loop; the waiting task yields to other jobs on the loop.

    Cancelling the task running `poll` also stops it, in addition to the
    optional `cancel` event.
    """

    def __init__(
        self,
        api: AsyncInlinerApi,
        wait: Callable[[float, asyncio.Event | None], Awaitable[bool]] = _async_wait,
    ) -> None:
        self.api = api
        self.wait = wait

    async def check(self, content_path: str) -> PollOutcome:
        status_error = None
        try:
            data = await self.api.fetch("GET", STATUS_ENDPOINT + content_path)
            outcome = status_outcome(data, content_path, self.api.config.image_url)
        except InlinerError as exc:
            status_error = exc
        else:
            if outcome is not None:
                return outcome

        try:
            response = await self.api.fetch_asset(content_path)
        except InlinerError as exc:
            return TransientFailure(exc)
        cdn = asset_outcome(response, content_path, self.api.asset_url(content_path))
        return combine_outcomes(status_error, cdn)

    async def poll(
        self,
        content_path: str,
        label: str,
        max_seconds: float = 180,
        cancel: asyncio.Event | None = None,
    ) -> GenerationResult:
        total = attempt_budget(max_seconds)
        last_error = None
        cancelled = cancel is not None and cancel.is_set()

        for attempt in range(1, total + 1):
            if cancelled:
                outcome = FatalFailure(PollCancelledError(label, content_path))
            else:
                outcome = await self.check(content_path)
            if isinstance(outcome, Ready):
                logger.info("%s %s: ready after %d attempt(s)", label, content_path, attempt)
                return outcome.result
            if isinstance(outcome, FatalFailure):
                raise outcome.cause
            if isinstance(outcome, TransientFailure):
                last_error = outcome.cause
            _log_outcome(outcome, label, content_path, attempt, total)

            if attempt < total:
                cancelled = await self.wait(POLL_INTERVAL_SECONDS, cancel)

        raise InlinerTimeoutError(label, max_seconds, attempts=total, last_error=last_error)
