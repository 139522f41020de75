from collective.services import (
    analytics_service,
    category_service,
    repository,
    settlement_service,
)


__all__ = [
    "analytics_service",
    "category_service",
    "repository",
    "settlement_service",
]
