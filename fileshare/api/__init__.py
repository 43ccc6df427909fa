"""
API module.

FastAPI application, access gate middleware and routers for all HTTP
endpoints.
"""
