"""Services Layer — repositories, synchronized controllers and simulated gateways.

Invariants:
    - All storage access goes through an entity repository
    - Controllers own the in-memory cache; repositories own nothing but IO

Design Decisions:
    - Imperative shell around the pure core/ functions
"""
