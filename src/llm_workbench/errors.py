"""Error taxonomy for the settings and directory workflows.

User-visible messages live here so the reconciler, the HTTP layer and the
console share the exact same wording.
"""

from __future__ import annotations

REJECTED_MESSAGE = (
    "Connection Failed! Please verify your model credentials in the backend configuration."
)
TRANSPORT_FALLBACK_MESSAGE = "Failed to verify provider configuration"
NO_VALID_MODEL_MESSAGE = "No valid models for the selected provider."
VERIFIED_MESSAGE = "Provider configuration verified successfully"


class WorkbenchError(RuntimeError):
    """Base class for all errors raised by llm_workbench."""


class VerificationTransportError(WorkbenchError):
    """The verification call itself failed (network, HTTP error, bad payload)."""

    def __init__(self, message: str | None = None):
        self.message = message or TRANSPORT_FALLBACK_MESSAGE
        super().__init__(self.message)


class PersistenceError(WorkbenchError):
    """A persistent store read or write failed.

    ``partial`` is set when an earlier write of the same flow already landed,
    i.e. the stored values are out of sync with each other.
    """

    def __init__(self, message: str, partial: bool = False):
        super().__init__(message)
        self.partial = partial


class SessionClosedError(WorkbenchError):
    """Operation attempted on a session that was committed-and-closed or cancelled."""


class SessionAlreadyOpenError(WorkbenchError):
    """A settings session is already open for this reconciler."""
