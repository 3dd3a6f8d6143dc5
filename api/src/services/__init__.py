"""Validation and classification services.

Each module holds one operation of the request validation layer; operations
with a legacy weakness ship a faithful and a hardened implementation chosen
by a ``build_*`` factory.
"""
