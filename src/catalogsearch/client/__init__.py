"""Catalog Search Python SDK — Client library for the catalog search API.

Quick start::

    from catalogsearch.client import CatalogSearchClient

    client = CatalogSearchClient("http://localhost:3000")
    response = client.search("abbey road")
    print(response["data"]["topResult"])
"""

from catalogsearch.client.client import AsyncCatalogSearchClient, CatalogSearchClient, CatalogSearchError

__all__ = ["AsyncCatalogSearchClient", "CatalogSearchClient", "CatalogSearchError"]
