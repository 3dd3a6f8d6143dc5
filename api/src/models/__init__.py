"""Value types for the FastAPI service.

This package contains Pydantic models for request parsing and the values
passed between routers and services.
"""
