"""
Shared request dependencies.

The catalog snapshot and the usage intelligence store are created once in
create_app() and kept on app.state.
"""

from typing import Annotated

from fastapi import Depends, Request

from estimator.services.catalog import CatalogSnapshot
from estimator.services.usage_intelligence import MaterialIntelligenceStore


def get_catalog(request: Request) -> CatalogSnapshot:
    return request.app.state.catalog


def get_intelligence_store(request: Request) -> MaterialIntelligenceStore:
    return request.app.state.intelligence_store


Catalog = Annotated[CatalogSnapshot, Depends(get_catalog)]
IntelligenceStore = Annotated[MaterialIntelligenceStore, Depends(get_intelligence_store)]
