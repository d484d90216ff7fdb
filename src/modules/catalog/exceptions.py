"""Catalog exceptions raised by ``CatalogService`` look-ups."""

from __future__ import annotations


class SchoolNotFound(Exception):
    """The school does not exist or is not active."""


class SupplyPackNotFound(Exception):
    """The supply pack does not exist."""


class SupplyNotFound(Exception):
    """The pack exists but has no supply with the given id."""


class ElectronicNotFound(Exception):
    """The electronic product does not exist."""
