"""Infrastructure Layer — external service clients and cross-cutting concerns.

Invariants:
    - Implements the Protocols in core/repository_protocols.py
    - Every external failure is mapped to a PortfolioError subclass before leaving this layer
"""
