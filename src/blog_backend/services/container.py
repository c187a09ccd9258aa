"""
Component wiring.

`build_services` constructs every component from one `Settings` instance. The
application factory stores the result on `app.state.services`; route dependencies read
it from there, so nothing in the package depends on module-level globals.
"""

from dataclasses import dataclass
from typing import Optional

from blog_backend.config import Settings
from blog_backend.database import DatabaseManager
from blog_backend.services.content_store import ContentStore
from blog_backend.services.credential_store import CredentialStore
from blog_backend.services.favorites_ledger import FavoritesLedger
from blog_backend.services.token_service import Clock, TokenService


@dataclass
class ServiceContainer:
    settings: Settings
    db_manager: DatabaseManager
    tokens: TokenService
    credentials: CredentialStore
    content: ContentStore
    favorites: FavoritesLedger


def build_services(
    settings: Settings,
    db_manager: Optional[DatabaseManager] = None,
    clock: Optional[Clock] = None,
) -> ServiceContainer:
    """Build the component graph. `db_manager` and `clock` are overridable for tests."""
    db_manager = db_manager or DatabaseManager(settings)
    return ServiceContainer(
        settings=settings,
        db_manager=db_manager,
        tokens=TokenService(settings, clock=clock),
        credentials=CredentialStore(db_manager, settings),
        content=ContentStore(db_manager, settings),
        favorites=FavoritesLedger(db_manager, settings),
    )
