"""Core Layer — pure domain logic and boundary contracts, no IO, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, models/ or db/
    - All functions are pure and deterministic; async appears only in Protocol signatures

Design Decisions:
    - Functional core separated from imperative shell (ADR: impureim sandwich)
"""
