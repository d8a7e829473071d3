"""Users - list and create users in the document store.

Invariants:
    - Request body validated by Pydantic (400) before the store is called
    - Store failures surface as StoreUnavailableError/StoreQueryError, handled globally
    - Listing is capped at settings.list_limit
"""

from fastapi import APIRouter, Depends, status

from roster.api.dependencies import get_app_settings, get_user_store
from roster.config import Settings
from roster.core.repository_protocols import UserStore
from roster.schemas.user import UserCreate, UserResponse

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[UserResponse])
async def list_users(
    store: UserStore = Depends(get_user_store),
    settings: Settings = Depends(get_app_settings),
):
    return await store.list_all(settings.list_limit)


@router.post(
    "", response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_user(
    body: UserCreate, store: UserStore = Depends(get_user_store),
):
    """Create a user; the store assigns the id."""
    return await store.insert(body.model_dump())
