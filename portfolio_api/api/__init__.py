"""API Layer — FastAPI routes, dependencies, upload parsing and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Every endpoint returns the response envelope (core/envelope.py)

Design Decisions:
    - Thin routes delegate to services; HTTP concerns (auth, multipart) stay here
"""
