"""API Layer — FastAPI proxy routes and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return JSON, errors included

Design Decisions:
    - Thin routes delegate to the ConnectionManager
"""
