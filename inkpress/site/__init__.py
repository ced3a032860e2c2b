"""Utilities for planning, rendering, and writing inkpress sites."""

from .builder import SiteBuilder, copy_static
from .models import BuildReport, PageIndex, Route, SitePlan
from .planner import (
    MalformedNameError,
    MissingMetadataError,
    RouteConflictError,
    plan_site,
    route_page,
)

__all__ = [
    "BuildReport",
    "MalformedNameError",
    "MissingMetadataError",
    "PageIndex",
    "Route",
    "RouteConflictError",
    "SiteBuilder",
    "SitePlan",
    "copy_static",
    "plan_site",
    "route_page",
]
