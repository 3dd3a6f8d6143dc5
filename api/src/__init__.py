"""FastAPI service for the DevSecOps demo application.

This package provides the HTTP endpoints of the request validation and
classification layer, in faithful and hardened variants.
"""

__version__ = "1.0.0"
