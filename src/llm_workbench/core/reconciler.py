"""LLM settings reconciliation.

Three copies of the provider/model pair are kept apart here:

* the *committed* configuration, owned by :class:`ConfigStateStore`;
* the *initial* pair, snapshotted when a session opens;
* the *selected* pair, the live form state edited by the user.

Only :meth:`SettingsReconciler.commit` (after the backend said ``success``)
and :meth:`SettingsReconciler.cancel` (forced revert to the initial pair)
write to the committed configuration.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from ..errors import (
    NO_VALID_MODEL_MESSAGE,
    REJECTED_MESSAGE,
    TRANSPORT_FALLBACK_MESSAGE,
    VERIFIED_MESSAGE,
    PersistenceError,
    SessionAlreadyOpenError,
    SessionClosedError,
    VerificationTransportError,
)
from ..llm.catalog import ProviderModelCatalog
from ..services.verification import VerificationService
from ..settings import LLMConfiguration
from ..shell.interfaces import LogNotifier, Notifier
from ..state.config_state import ConfigStateStore

logger = logging.getLogger(__name__)


class CommitResult(str, Enum):
    COMMITTED = "committed"
    REJECTED = "rejected"
    FAILED = "failed"


class SessionState(str, Enum):
    EDITING = "editing"
    VERIFYING = "verifying"
    CLOSED = "closed"


@dataclass
class ReconciliationSession:
    """Form state of one settings-editing interaction."""

    initial_provider: str
    initial_model: str
    selected_provider: str
    selected_model: Optional[str]
    filtered_models: List[str] = field(default_factory=list)
    error_message: Optional[str] = None
    state: SessionState = SessionState.EDITING
    in_flight: int = 0

    @property
    def has_pending_changes(self) -> bool:
        return (
            self.selected_provider != self.initial_provider
            or self.selected_model != self.initial_model
        )

    @property
    def is_open(self) -> bool:
        return self.state is not SessionState.CLOSED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "initial_provider": self.initial_provider,
            "initial_model": self.initial_model,
            "selected_provider": self.selected_provider,
            "selected_model": self.selected_model,
            "filtered_models": list(self.filtered_models),
            "has_pending_changes": self.has_pending_changes,
            "error_message": self.error_message,
            "state": self.state.value,
        }


class SettingsReconciler:
    """Orchestrates selection, verification-gated commit and revert."""

    def __init__(
        self,
        config_store: ConfigStateStore,
        catalog: ProviderModelCatalog,
        verifier: VerificationService,
        notifier: Notifier | None = None,
    ):
        self.config_store = config_store
        self.catalog = catalog
        self.verifier = verifier
        self.notifier = notifier or LogNotifier()
        self.session: Optional[ReconciliationSession] = None

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------
    def open(self, current: LLMConfiguration | None = None) -> ReconciliationSession:
        if self.session is not None and self.session.is_open:
            raise SessionAlreadyOpenError("A settings session is already open")
        config = current if current is not None else self.config_store.snapshot()
        session = ReconciliationSession(
            initial_provider=config.provider,
            initial_model=config.model,
            selected_provider=config.provider,
            selected_model=config.model,
            filtered_models=self.catalog.models_for(config.provider),
        )
        self.session = session
        logger.debug("[settings] session opened provider=%s model=%s", config.provider, config.model)
        return session

    def close(self, session: ReconciliationSession) -> None:
        """Discard the session without touching the committed configuration."""
        session.state = SessionState.CLOSED
        if self.session is session:
            self.session = None

    async def cancel(self, session: ReconciliationSession) -> LLMConfiguration:
        """Force the committed provider/model back to the snapshot taken at open.

        Runs even when nothing was edited, so an out-of-band change made while
        the session was open is undone as well.
        """
        self._ensure_open(session)
        reverted = self.config_store.snapshot().with_selection(
            session.initial_provider, session.initial_model
        )
        self.close(session)
        await self.config_store.dispatch(reverted)
        logger.info("[settings] reverted to provider=%s model=%s", reverted.provider, reverted.model)
        return reverted

    # ------------------------------------------------------------------
    # Form edits
    # ------------------------------------------------------------------
    def on_provider_changed(self, session: ReconciliationSession, new_provider: str) -> ReconciliationSession:
        self._ensure_open(session)
        if new_provider == session.selected_provider:
            return session
        session.selected_provider = new_provider
        session.filtered_models = self.catalog.models_for(new_provider)
        # model is reset before the pending flag is read
        session.selected_model = session.filtered_models[0] if session.filtered_models else None
        session.error_message = None
        return session

    def on_model_changed(self, session: ReconciliationSession, new_model: str) -> ReconciliationSession:
        self._ensure_open(session)
        if new_model == session.selected_model:
            return session
        session.selected_model = new_model
        session.error_message = None
        return session

    # ------------------------------------------------------------------
    # Commit
    # ------------------------------------------------------------------
    async def commit(self, session: ReconciliationSession) -> CommitResult:
        """Verify the selected pair and, on ``success``, make it the committed one.

        The session stays open whatever the outcome. Overlapping calls are not
        serialised: each one that verifies successfully dispatches, so the last
        to resolve wins. Rejected and failed outcomes are also reported through
        the notifier.
        """
        self._ensure_open(session)
        result = await self._verify_and_dispatch(session)
        if result is not CommitResult.COMMITTED:
            self.notifier.error(session.error_message or TRANSPORT_FALLBACK_MESSAGE)
        return result

    async def _verify_and_dispatch(self, session: ReconciliationSession) -> CommitResult:
        provider = session.selected_provider
        model = session.selected_model

        if not self.catalog.is_valid(provider, model):
            session.error_message = NO_VALID_MODEL_MESSAGE
            logger.warning("[settings] %s/%s is not in the catalog", provider, model)
            return CommitResult.REJECTED

        session.in_flight += 1
        session.state = SessionState.VERIFYING
        try:
            result = await self.verifier.verify(provider, model)
        except VerificationTransportError as exc:
            session.error_message = exc.message
            return CommitResult.FAILED
        except Exception as exc:
            logger.exception("[settings] verification of %s/%s crashed", provider, model)
            session.error_message = getattr(exc, "message", None) or TRANSPORT_FALLBACK_MESSAGE
            return CommitResult.FAILED
        finally:
            session.in_flight -= 1
            if session.in_flight == 0 and session.is_open:
                session.state = SessionState.EDITING

        if not result.ok:
            session.error_message = REJECTED_MESSAGE
            logger.warning("[settings] backend rejected %s/%s status=%s", provider, model, result.status)
            return CommitResult.REJECTED

        committed = self.config_store.snapshot().with_selection(provider, model)
        try:
            await self.config_store.dispatch(committed)
        except PersistenceError as exc:
            logger.error("[settings] could not persist %s/%s: %s", provider, model, exc)
            session.error_message = str(exc)
            return CommitResult.FAILED

        session.error_message = None
        logger.info("[settings] committed provider=%s model=%s", provider, model)
        self.notifier.success(VERIFIED_MESSAGE)
        return CommitResult.COMMITTED

    # ------------------------------------------------------------------
    @staticmethod
    def _ensure_open(session: ReconciliationSession) -> None:
        if not session.is_open:
            raise SessionClosedError("Settings session is closed")
