from __future__ import annotations

from fastapi import Request

from ..domain.auth import RequestAuthenticator
from ..domain.credentials import CredentialValidator
from ..domain.errors import AuthenticationError
from ..domain.session import SessionData, SessionIssuer
from ..service.upload_service import UploadPipeline
from ..settings import Settings
from ..store.assets import AssetCatalog
from ..store.config_store import ConfigStore


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_validator(request: Request) -> CredentialValidator:
    return request.app.state.validator


def get_issuer(request: Request) -> SessionIssuer:
    return request.app.state.issuer


def get_config_store(request: Request) -> ConfigStore:
    return request.app.state.config_store


def get_catalog(request: Request) -> AssetCatalog:
    return request.app.state.catalog


def get_pipeline(request: Request) -> UploadPipeline:
    return request.app.state.pipeline


def require_admin(request: Request) -> SessionData:
    """Dependency for every admin route; raises before the handler runs."""
    authenticator: RequestAuthenticator = request.app.state.authenticator
    session = authenticator.authenticate(request.cookies, request.headers)
    if session is None:
        raise AuthenticationError()
    request.state.session = session
    return session
