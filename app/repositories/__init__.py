"""
Catalog backend package.

`backend` holds the boundary protocol, the in-memory implementation and the
process-wide factory; `remote` talks to a catalog service over HTTP.

A custom implementation can be plugged in with `CATALOG_BACKEND_IMPL`, a dotted
path such as:

    myapp.data.catalog:PostgresCatalogBackend
"""
