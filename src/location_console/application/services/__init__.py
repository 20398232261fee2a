"""Application services (use cases) for the location console."""

from location_console.application.services.location_admin_service import (
    LocationAdminService,
    find_external_key,
)
from location_console.application.services.location_normalizer import (
    LocationNormalizer,
    iter_snapshot_items,
)

__all__ = [
    "LocationAdminService",
    "LocationNormalizer",
    "find_external_key",
    "iter_snapshot_items",
]
