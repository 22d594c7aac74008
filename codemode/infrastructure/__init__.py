"""Infrastructure Layer — child processes, files, downstream sessions and logging.

Invariants:
    - Every process, file and network side effect lives here; core/ stays pure
    - External failures mapped to CodemodeError or ExecutionFailure before leaving
"""
