from .routes import tags_router

__all__ = ["tags_router"]
