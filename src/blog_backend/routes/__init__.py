"""HTTP routers of the Blog Backend."""

from blog_backend.routes.auth import router as auth_router
from blog_backend.routes.favorites import router as favorites_router
from blog_backend.routes.health import router as health_router
from blog_backend.routes.posts import router as posts_router

__all__ = ["auth_router", "favorites_router", "health_router", "posts_router"]
