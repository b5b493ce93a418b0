"""Core Layer — pure generation logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are pure and deterministic (timestamps are passed in)

Design Decisions:
    - Functional core separated from imperative shell: planning, aggregation, quota
      rules, and notification rendering are tested without fakes
"""
