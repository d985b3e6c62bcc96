"""Portfolio API Package — CRUD backend for projects, certifications and journey items.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports only, no star exports
"""
