"""Items - list and create items in the relational store."""

from fastapi import APIRouter, Depends, status

from roster.api.dependencies import get_app_settings, get_item_store
from roster.config import Settings
from roster.core.repository_protocols import ItemStore
from roster.schemas.item import ItemCreate, ItemCreated, ItemResponse

router = APIRouter(prefix="/items", tags=["items"])


@router.get("", response_model=list[ItemResponse])
async def list_items(
    store: ItemStore = Depends(get_item_store),
    settings: Settings = Depends(get_app_settings),
):
    return await store.list_all(settings.list_limit)


@router.post(
    "", response_model=ItemCreated,
    status_code=status.HTTP_201_CREATED,
)
async def create_item(
    body: ItemCreate, store: ItemStore = Depends(get_item_store),
):
    created = await store.insert(body.model_dump())
    return {"id": created["id"]}
