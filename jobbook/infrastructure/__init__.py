"""Infrastructure Layer — storage, simulated receipt bucket and cross-cutting concerns.

Invariants:
    - Storage failures are mapped to StorageError before leaving this layer
    - Simulated external calls never raise to their callers

Design Decisions:
    - Latency and randomness injected, so tests run without real waits
"""
