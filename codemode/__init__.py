"""Codemode Package — sandboxed code execution with a proxy to MCP tool servers.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports only, no star exports
"""
