"""Roster Application Package - users and items CRUD API.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
