"""Route Modules - one file per resource.

Invariants:
    - Each module defines its own APIRouter with prefix and tags
    - Routes validate input and delegate to a store; no persistence logic here
"""
