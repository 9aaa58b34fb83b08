"""FastAPI routers for the service.

Routers are grouped by domain; everything is mounted under /v1.
"""
