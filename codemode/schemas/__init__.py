"""Pydantic Schemas — request validation at the proxy's HTTP boundary.

Invariants:
    - Schemas validate envelope SHAPE only; tool arguments stay opaque
"""
