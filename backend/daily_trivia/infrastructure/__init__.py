"""Infrastructure Layer — concrete implementations of the core boundary protocols.

Invariants:
    - Every external failure is mapped to a TriviaError subclass before leaving this package
    - No business rules here: parsing and transport only
"""
