"""Upstream catalog lookups consumed by the session pipeline."""

from .http import HttpCatalog
from .protocols import Catalog

__all__ = ["Catalog", "HttpCatalog"]
