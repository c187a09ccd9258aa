"""FastAPI dependencies resolving components from `app.state.services`."""

from fastapi import Request

from blog_backend.services.container import ServiceContainer
from blog_backend.services.content_store import ContentStore
from blog_backend.services.credential_store import CredentialStore
from blog_backend.services.favorites_ledger import FavoritesLedger
from blog_backend.services.token_service import TokenService


def get_services(request: Request) -> ServiceContainer:
    return request.app.state.services


def get_token_service(request: Request) -> TokenService:
    return get_services(request).tokens


def get_credential_store(request: Request) -> CredentialStore:
    return get_services(request).credentials


def get_content_store(request: Request) -> ContentStore:
    return get_services(request).content


def get_favorites_ledger(request: Request) -> FavoritesLedger:
    return get_services(request).favorites
