"""Catalog-related queries."""

from .statistics_queries import (
    GetCatalogStatisticsQuery,
    GetCatalogStatisticsHandler,
    CatalogStatistics,
)

__all__ = [
    "GetCatalogStatisticsQuery",
    "GetCatalogStatisticsHandler",
    "CatalogStatistics",
]
