"""REST routers. Each factory takes its collaborators explicitly."""

from .auth import create_auth_dependency, create_auth_router
from .errors import install_error_handlers
from .orders import create_orders_router
from .prices import create_prices_router

__all__ = [
    "create_auth_dependency",
    "create_auth_router",
    "create_orders_router",
    "create_prices_router",
    "install_error_handlers",
]
