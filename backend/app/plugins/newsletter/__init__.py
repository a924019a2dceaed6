"""
Newsletter plugin.

Newsletters and subscribers live in process memory until a persistent
store is wired in; see ``service.py``.
"""
from backend.app.plugins.newsletter.router import router
from backend.app.plugins.registry import Plugin

plugin = Plugin(
    name="newsletter",
    router=router,
    prefix="/newsletter",
    description="Per-tenant newsletters and subscriber lists",
    tags=["Newsletter"],
)

__all__ = ["plugin"]
