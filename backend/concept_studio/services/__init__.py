"""Services Layer — request parsing, drafting, fan-out, quota, and orchestration.

Invariants:
    - Collaborators are injected; no service builds its own client
    - The orchestrator is the only module that knows the full control flow
"""
