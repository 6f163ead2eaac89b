"""Read-side queries over the catalog."""

from .catalog import GetCatalogStatisticsQuery, GetCatalogStatisticsHandler, CatalogStatistics

__all__ = ["GetCatalogStatisticsQuery", "GetCatalogStatisticsHandler", "CatalogStatistics"]
