"""API Layer - FastAPI routes, dependencies, middleware and error handlers.

Invariants:
    - Routes registered explicitly in main.create_app (no auto-discovery)
    - All endpoints return JSON; every failure uses the {"error": {...}} envelope
"""
