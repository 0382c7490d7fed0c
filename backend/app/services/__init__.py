"""Services Layer — imperative shell around the pure authorization core.

Invariants:
    - Services receive their repositories; they never build DB sessions
    - Services raise typed errors from core/errors.py, never HTTPException
"""
