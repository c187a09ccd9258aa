from blog_backend.routes.auth.routes import router

__all__ = ["router"]
