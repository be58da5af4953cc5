"""
Route definitions for the catalogue API.

Endpoints under /api:
- GET  /images        : every catalogue item
- GET  /search?q=     : items whose title contains ``q`` (case-insensitive)
- GET  /images/{id}   : one catalogue item
- GET  /banners       : every banner

Handlers are plain functions; FastAPI runs them in its thread pool so
blocking store calls do not hold up the event loop.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request

from .schemas import Banner, CatalogItem, ErrorBody
from .service import CatalogService

router = APIRouter(prefix="/api", tags=["catalog"])


def get_catalog_service(request: Request) -> CatalogService:
    """Return the service bound to the running application."""
    return request.app.state.catalog_service


_LOOKUP_ERRORS = {404: {"model": ErrorBody}, 500: {"model": ErrorBody}}


@router.get("/images", response_model=List[CatalogItem], responses=_LOOKUP_ERRORS)
def list_images(service: CatalogService = Depends(get_catalog_service)) -> List[CatalogItem]:
    return service.list_catalog()


@router.get(
    "/search",
    response_model=List[CatalogItem],
    responses={400: {"model": ErrorBody}, 500: {"model": ErrorBody}},
)
def search_images(
    q: Optional[str] = Query(default=None, description="Text to look for in titles"),
    service: CatalogService = Depends(get_catalog_service),
) -> List[CatalogItem]:
    """Returns matching items sorted by title; an empty list when nothing matches."""
    return service.search_catalog(q)


@router.get("/images/{image_id}", response_model=CatalogItem, responses=_LOOKUP_ERRORS)
def get_image(image_id: str, service: CatalogService = Depends(get_catalog_service)) -> CatalogItem:
    return service.get_catalog_item(image_id)


@router.get("/banners", response_model=List[Banner], responses=_LOOKUP_ERRORS)
def list_banners(service: CatalogService = Depends(get_catalog_service)) -> List[Banner]:
    return service.list_banners()
