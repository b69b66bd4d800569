"""Compliance Engine — donation limits, congressional session boundaries, election-date notifications.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports only, no star exports
"""
