"""Services Layer — async orchestration around the pure stats core.

Invariants:
    - Services read from the store, call core/ functions, write results back
    - Collaborators are injected (StatsEngine wires them once)

Design Decisions:
    - One file per collaborator for locality
"""
