"""Exception hierarchy for the Inliner client.

Architectural role:
    Every failure the client raises derives from `InlinerError`, so callers can
    catch the whole family with one clause while still distinguishing the kinds
    below.

Propagation model:
    - `ValidationError` is raised before any network call is made.
    - `TransportError` propagates directly from non-polling operations.
    - Inside the polling loop, transport and decode faults are converted into
      per-attempt outcomes and only surface as `InlinerTimeoutError`.
"""

from __future__ import annotations


class InlinerError(Exception):
    """Base class for all client errors."""


class ValidationError(InlinerError):
    """Invalid or incomplete input detected before contacting the service."""


class TransportError(InlinerError):
    """HTTP or network failure.

    Attributes:
        status_code: HTTP status when a response was received, else `None`.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DecodeError(InlinerError):
    """Malformed base64 payload or JSON body."""


class RecommendationError(InlinerError):
    """Smart-URL recommendation call failed."""


class PollCancelledError(InlinerError):
    """Polling was aborted by an external cancellation signal."""

    def __init__(self, label: str, content_path: str) -> None:
        super().__init__(f"{label} cancelled while polling {content_path}")
        self.label = label
        self.content_path = content_path


class InlinerTimeoutError(InlinerError, TimeoutError):
    """Polling budget exhausted without a ready result.

    Attributes:
        label: Job-kind annotation ("Generating"/"Editing").
        max_seconds: Polling budget that was exhausted.
        attempts: Number of attempts performed.
        last_error: Last swallowed transient error, if any attempt failed.
    """

    def __init__(
        self,
        label: str,
        max_seconds: float,
        attempts: int = 0,
        last_error: BaseException | None = None,
    ) -> None:
        super().__init__(f"{label} timed out after {max_seconds}s")
        self.label = label
        self.max_seconds = max_seconds
        self.attempts = attempts
        self.last_error = last_error
