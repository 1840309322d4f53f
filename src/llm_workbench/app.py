from fastapi import FastAPI, HTTPException
from typing import List, Optional
from pydantic import BaseModel
import logging
from dotenv import load_dotenv

# Load env first so RuntimeSettings sees it
load_dotenv(".env", override=False)

from .core.directory_flow import DirectorySelectionFlow
from .core.reconciler import CommitResult, SettingsReconciler
from .errors import PersistenceError, SessionAlreadyOpenError, SessionClosedError
from .llm.catalog import ProviderModelCatalog, default_catalog
from .services.verification import HttpVerificationService, VerificationService
from .settings import RuntimeSettings
from .shell.interfaces import LogNotifier, Notifier
from .shell.web import RecordingNavigation, RequestDirectoryPicker
from .state.config_state import ConfigStateStore
from .storage.persistent_store import JsonFileStore, PersistentStore

logger = logging.getLogger(__name__)


class Workbench:
    """Holds the long-lived collaborators behind the HTTP surface."""

    def __init__(
        self,
        settings: RuntimeSettings,
        store: PersistentStore,
        verifier: VerificationService,
        catalog: ProviderModelCatalog | None = None,
        notifier: Notifier | None = None,
    ):
        self.settings = settings
        self.store = store
        self.verifier = verifier
        self.catalog = catalog or default_catalog()
        self.notifier = notifier or LogNotifier()
        self._reconciler: SettingsReconciler | None = None

    async def reconciler(self) -> SettingsReconciler:
        # config is hydrated on first use so construction never touches disk
        if self._reconciler is None:
            config_store = await ConfigStateStore.load(self.store, self.settings, self.catalog)
            self._reconciler = SettingsReconciler(config_store, self.catalog, self.verifier, self.notifier)
        return self._reconciler

    def directory_flow(self, paths: List[str], location: str) -> DirectorySelectionFlow:
        return DirectorySelectionFlow(
            picker=RequestDirectoryPicker(paths),
            store=self.store,
            navigation=RecordingNavigation(location),
            landing_route=self.settings.landing_route,
        )


class SessionPatch(BaseModel):
    provider: Optional[str] = None
    model: Optional[str] = None


class DirectoryRequest(BaseModel):
    paths: List[str] = []
    location: str = "/"


class DirectoryResponse(BaseModel):
    outcome: str
    path: Optional[str] = None
    action: Optional[str] = None


class CommitResponse(BaseModel):
    result: CommitResult
    session: Optional[dict] = None


def create_app(
    settings: RuntimeSettings | None = None,
    store: PersistentStore | None = None,
    verifier: VerificationService | None = None,
    catalog: ProviderModelCatalog | None = None,
) -> FastAPI:
    settings = settings or RuntimeSettings.from_env()
    workbench = Workbench(
        settings,
        store if store is not None else JsonFileStore(settings.store_path),
        verifier if verifier is not None else HttpVerificationService(settings.backend_url, timeout=settings.verify_timeout),
        catalog=catalog,
    )

    app = FastAPI(title="LLM Workbench Shell", version="0.1.0")
    app.state.workbench = workbench

    async def _open_session():
        reconciler = await workbench.reconciler()
        if reconciler.session is None:
            raise HTTPException(status_code=404, detail="No settings session is open")
        return reconciler, reconciler.session

    @app.get("/")
    async def root():
        return {"message": "LLM workbench shell is running. See /settings and /directory."}

    @app.get("/providers")
    async def list_providers():
        return workbench.catalog.providers()

    @app.get("/models")
    async def list_models(provider: str):
        models = workbench.catalog.models_for(provider)
        logger.info("[models] provider=%s models_found=%d", provider, len(models))
        return models

    @app.get("/settings")
    async def get_settings():
        reconciler = await workbench.reconciler()
        return reconciler.config_store.snapshot().to_dict()

    @app.post("/settings/session")
    async def open_session():
        reconciler = await workbench.reconciler()
        try:
            session = reconciler.open()
        except SessionAlreadyOpenError as exc:
            raise HTTPException(status_code=409, detail=str(exc))
        return session.to_dict()

    @app.get("/settings/session")
    async def get_session():
        _, session = await _open_session()
        return session.to_dict()

    @app.patch("/settings/session")
    async def patch_session(patch: SessionPatch):
        reconciler, session = await _open_session()
        try:
            if patch.provider:
                reconciler.on_provider_changed(session, patch.provider)
            if patch.model:
                reconciler.on_model_changed(session, patch.model)
        except SessionClosedError as exc:
            raise HTTPException(status_code=409, detail=str(exc))
        return session.to_dict()

    @app.post("/settings/session/commit", response_model=CommitResponse)
    async def commit_session():
        reconciler, session = await _open_session()
        try:
            result = await reconciler.commit(session)
        except SessionClosedError as exc:
            raise HTTPException(status_code=409, detail=str(exc))
        if result is CommitResult.COMMITTED:
            reconciler.close(session)
            return CommitResponse(result=result)
        return CommitResponse(result=result, session=session.to_dict())

    @app.delete("/settings/session")
    async def cancel_session():
        reconciler, session = await _open_session()
        try:
            reverted = await reconciler.cancel(session)
        except PersistenceError as exc:
            raise HTTPException(status_code=500, detail=str(exc))
        return reverted.to_dict()

    @app.post("/directory", response_model=DirectoryResponse)
    async def select_directory(req: DirectoryRequest):
        flow = workbench.directory_flow(req.paths, req.location)
        try:
            outcome = await flow.select_directory()
        except PersistenceError as exc:
            raise HTTPException(status_code=500, detail=str(exc))
        return DirectoryResponse(**outcome.to_dict())

    return app


app = create_app()
