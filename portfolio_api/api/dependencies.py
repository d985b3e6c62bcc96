"""API Dependencies — FastAPI providers for stores, services and the auth gate.

Invariants:
    - One SqlResourceStore per request (bound to the request's session)
    - The blob store is process-wide, built once from settings
    - require_auth raises AuthError (401) for a missing, invalid or expired bearer token
    - optional_auth never rejects: a bad token is treated as anonymous

Design Decisions:
    - Services are assembled here and injected into routes: tests swap any layer
      through app.dependency_overrides
"""

import logging

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_api.config import Settings, get_settings
from portfolio_api.core.errors import AuthError
from portfolio_api.core.repository_protocols import BlobStore, ResourceStore
from portfolio_api.infrastructure.blob_storage import InMemoryBlobStore, S3BlobStore
from portfolio_api.infrastructure.database import get_db
from portfolio_api.infrastructure.resource_store import SqlResourceStore
from portfolio_api.infrastructure.token_verifier import TokenClaims, TokenVerifier
from portfolio_api.services.certification_service import CertificationService
from portfolio_api.services.image_lifecycle import ImageLifecycleManager
from portfolio_api.services.journey_service import JourneyService
from portfolio_api.services.project_service import ProjectService

logger = logging.getLogger(__name__)

_bearer = HTTPBearer(auto_error=False)

# Singleton (built on first use)
_blob_store: BlobStore | None = None


def build_blob_store(settings: Settings) -> BlobStore:
    if settings.storage_backend == "memory":
        return InMemoryBlobStore()
    return S3BlobStore(
        bucket=settings.storage_bucket,
        region=settings.storage_region,
        endpoint_url=settings.storage_endpoint_url,
        access_key_id=settings.storage_access_key_id,
        secret_access_key=settings.storage_secret_access_key,
        public_base_url=settings.storage_public_base_url,
    )


def get_blob_store() -> BlobStore:
    global _blob_store
    if _blob_store is None:
        _blob_store = build_blob_store(get_settings())
    return _blob_store


def get_store(db: AsyncSession = Depends(get_db)) -> ResourceStore:
    return SqlResourceStore(db)


def get_image_manager(
    blob_store: BlobStore = Depends(get_blob_store),
    settings: Settings = Depends(get_settings),
) -> ImageLifecycleManager:
    return ImageLifecycleManager(
        blob_store, settings.allowed_image_types, settings.max_file_size,
    )


def get_token_verifier(settings: Settings = Depends(get_settings)) -> TokenVerifier:
    return TokenVerifier(
        settings.jwt_secret, settings.jwt_algorithm, settings.jwt_expires_in_seconds,
    )


# ─── Auth gate ──────────────────────────────────────────────────

async def require_auth(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> TokenClaims:
    if credentials is None:
        raise AuthError("Access token required")
    return verifier.verify(credentials.credentials)


async def optional_auth(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> TokenClaims | None:
    if credentials is None:
        return None
    try:
        return verifier.verify(credentials.credentials)
    except AuthError as e:
        logger.debug(f"Ignoring bad optional token: {e.message}")
        return None


# ─── Services ───────────────────────────────────────────────────

def get_project_service(
    store: ResourceStore = Depends(get_store),
    images: ImageLifecycleManager = Depends(get_image_manager),
) -> ProjectService:
    return ProjectService(store, images)


def get_certification_service(
    store: ResourceStore = Depends(get_store),
) -> CertificationService:
    return CertificationService(store)


def get_journey_service(store: ResourceStore = Depends(get_store)) -> JourneyService:
    return JourneyService(store)
