"""
Plugin host.

A plugin is a package exposing a module-level ``plugin`` object. Enabled
plugins are listed in ``settings.enabled_plugins`` and mounted under the API
prefix when the app is built.
"""
import importlib
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from fastapi import APIRouter, FastAPI

logger = logging.getLogger(__name__)

# name -> import path of the package providing `plugin`
BUILTIN_PLUGINS: Dict[str, str] = {
    "newsletter": "backend.app.plugins.newsletter",
}


@dataclass
class Plugin:
    name: str
    router: APIRouter
    prefix: str
    description: str = ""
    tags: List[str] = field(default_factory=list)


def load_plugin(name: str) -> Plugin:
    try:
        module_path = BUILTIN_PLUGINS[name]
    except KeyError:
        raise ValueError(f"Unknown plugin '{name}'. Available: {sorted(BUILTIN_PLUGINS)}")
    module = importlib.import_module(module_path)
    return module.plugin


def register_plugins(app: FastAPI, names: Iterable[str], api_prefix: str = "") -> List[Plugin]:
    """Mount each enabled plugin's router. Unknown names fail fast at startup."""
    registered = []
    for name in names:
        plugin = load_plugin(name)
        app.include_router(
            plugin.router,
            prefix=f"{api_prefix}{plugin.prefix}",
            tags=plugin.tags or [plugin.name],
        )
        registered.append(plugin)
        logger.info(f"Plugin registered: {plugin.name} at {api_prefix}{plugin.prefix}")
    return registered
