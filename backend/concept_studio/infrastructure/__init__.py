"""Infrastructure Layer — collaborator clients, persistence, and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - All external calls wrapped with timeout/error mapping (ExternalServiceError)

Design Decisions:
    - Each collaborator satisfies a Protocol from core/repository_protocols.py
"""
