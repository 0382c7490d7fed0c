"""Users API Package — user record management behind JWT authentication.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
