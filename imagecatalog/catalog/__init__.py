"""
Catalog package for the image catalogue API.

This package contains the schemas, the document store adapter, the
query service and the route definitions that expose a read-only REST
API over two collections: ``details`` (catalogue items shown as image
cards with a detail page) and ``banners`` (home page banner images).
"""

from .router import router as catalog_router  # noqa: F401
