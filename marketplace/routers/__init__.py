"""
API routers, all mounted under the configured API prefix.
"""

from . import (
    auth,
    categories,
    admin_categories,
    service_catalog,
    properties,
    admin,
    listing_limits,
    seller,
    notifications,
    content,
    advertisements,
    app_download,
)

ROUTERS = [
    auth.router,
    categories.router,
    admin_categories.router,
    service_catalog.router,
    properties.router,
    admin.router,
    listing_limits.router,
    seller.router,
    notifications.router,
    content.router,
    advertisements.router,
    app_download.router,
]

__all__ = ["ROUTERS"]
