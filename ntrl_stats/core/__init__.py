"""Core Layer — pure stats logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are pure and deterministic (clock values are passed in)

Design Decisions:
    - Functional core separated from imperative shell: services read the store,
      call core functions, write the result back
"""
