# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT
from ._cataloger import Cataloger, CatalogerResult
from ._orchestrator import CatalogResult, catalog_packages, catalog_source
from ._registry import (
    ALL_CATALOGERS_PATTERN,
    CatalogerRegistry,
    filter_catalogers,
    has_full_word,
    new_registry,
    requested_all_catalogers,
)

__all__ = [
    "Cataloger",
    "CatalogerResult",
    "CatalogResult",
    "catalog_packages",
    "catalog_source",
    "CatalogerRegistry",
    "ALL_CATALOGERS_PATTERN",
    "filter_catalogers",
    "has_full_word",
    "new_registry",
    "requested_all_catalogers",
]
