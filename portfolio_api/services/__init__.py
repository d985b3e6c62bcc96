"""Services — orchestration between validated input, the resource store and blob storage.

Invariants:
    - Services receive their collaborators through the constructor
    - Services raise PortfolioError subclasses; they never build HTTP responses
"""
