"""Tool handlers. Every module here exposing a `router` is registered."""
from importlib import import_module
from pathlib import Path
from pkgutil import iter_modules

from ..routing import ToolRoute, ToolRouter

routes: dict[str, ToolRoute] = {}

for info in iter_modules([str(Path(__file__).parent)]):
    if info.ispkg:
        continue
    router = getattr(import_module(f"{__name__}.{info.name}"), "router", None)
    if not isinstance(router, ToolRouter):
        continue
    duplicate = routes.keys() & router.routes.keys()
    if duplicate:
        raise ValueError(f"Tools registered in more than one module: {', '.join(sorted(duplicate))}")
    routes.update(router.routes)
