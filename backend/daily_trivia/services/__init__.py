"""Services Layer — async orchestration around the pure core.

Invariants:
    - Services depend on core/ and on Protocols, never on concrete infrastructure
    - Store failures propagate unchanged; external failures are handled per service

Design Decisions:
    - Impureim sandwich: read (store/external) → pure decide (core) → write (store)
"""
