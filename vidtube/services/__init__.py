"""Services Layer — the imperative shell around core/: every database read and write.

Invariants:
    - Services receive an AsyncSession (injected), never create engines
    - Every ownership-scoped write goes through ownership_gate
    - Every like/subscribe write goes through toggle_engine
    - Services raise VidTubeError subclasses; routes never catch them
"""
