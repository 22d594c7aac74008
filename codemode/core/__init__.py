"""Core Layer — pure logic for configuration parsing, execution and diagnostics.

Invariants:
    - No module in core/ imports from services/, api/, or infrastructure/
    - All functions are pure and deterministic (no IO, no async, no subprocesses)

Design Decisions:
    - Functional core separated from imperative shell: infrastructure/ owns every side effect
"""
