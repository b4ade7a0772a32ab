"""
SalesDesk Backend — Item Route Handlers
========================================

/item endpoints, all behind the auth guard. Literal sub-paths (/stats,
/hsn/{hsnCode}, /bulk-delete) come before /{item_id}.
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from salesdesk.dependencies import get_current_user, get_db_session
from salesdesk.schemas.common import (
    ApiResponse,
    BulkDeleteOut,
    BulkDeleteRequest,
    DeletedOut,
    ErrorResponse,
    StatsOut,
    ok,
)
from salesdesk.schemas.item import ItemCreate, ItemOut, ItemUpdate
from salesdesk.services.item_service import item_service
from salesdesk.validation import validated_body

router = APIRouter(
    prefix="/item",
    tags=["Item"],
    dependencies=[Depends(get_current_user)],
    responses={
        401: {"description": "Missing token", "model": ErrorResponse},
        403: {"description": "Invalid or expired token", "model": ErrorResponse},
    },
)


@router.get("", response_model=ApiResponse[List[ItemOut]], response_model_exclude_unset=True)
async def list_items(db: AsyncSession = Depends(get_db_session, scope="function")):
    items = await item_service.list_items(db)
    return ok(count=len(items), data=items)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[ItemOut],
    response_model_exclude_unset=True,
    responses={400: {"description": "Validation error or duplicate HSN code", "model": ErrorResponse}},
)
async def create_item(
    payload: ItemCreate = Depends(validated_body(ItemCreate)),
    db: AsyncSession = Depends(get_db_session, scope="function"),
):
    item = await item_service.create_item(db, payload)
    return ok(message="Item created successfully", data=item)


@router.get("/stats", response_model=ApiResponse[StatsOut], response_model_exclude_unset=True)
async def item_stats(db: AsyncSession = Depends(get_db_session, scope="function")):
    return ok(data=await item_service.get_stats(db))


@router.get(
    "/hsn/{hsn_code}",
    response_model=ApiResponse[List[ItemOut]],
    response_model_exclude_unset=True,
    summary="Items with a given HSN code",
)
async def items_by_hsn_code(hsn_code: str, db: AsyncSession = Depends(get_db_session, scope="function")):
    items = await item_service.get_items_by_hsn_code(db, hsn_code)
    return ok(count=len(items), data=items)


@router.post("/bulk-delete", response_model=ApiResponse[BulkDeleteOut], response_model_exclude_unset=True)
async def bulk_delete_items(
    payload: BulkDeleteRequest = Depends(validated_body(BulkDeleteRequest)),
    db: AsyncSession = Depends(get_db_session, scope="function"),
):
    result = await item_service.bulk_delete(db, payload.ids)
    return ok(message=f"{result.deleted_count} items deleted successfully", data=result)


@router.get(
    "/{item_id}",
    response_model=ApiResponse[ItemOut],
    response_model_exclude_unset=True,
    responses={404: {"description": "Item not found", "model": ErrorResponse}},
)
async def get_item(item_id: str, db: AsyncSession = Depends(get_db_session, scope="function")):
    return ok(data=await item_service.get_item(db, item_id))


@router.put(
    "/{item_id}",
    response_model=ApiResponse[ItemOut],
    response_model_exclude_unset=True,
    responses={
        400: {"description": "Validation error or duplicate HSN code", "model": ErrorResponse},
        404: {"description": "Item not found", "model": ErrorResponse},
    },
)
async def update_item(
    item_id: str,
    payload: ItemUpdate = Depends(validated_body(ItemUpdate)),
    db: AsyncSession = Depends(get_db_session, scope="function"),
):
    item = await item_service.update_item(db, item_id, payload)
    if item is None:
        return ok(message="No changes made")
    return ok(message="Item updated successfully", data=item)


@router.delete(
    "/{item_id}",
    response_model=ApiResponse[DeletedOut],
    response_model_exclude_unset=True,
    responses={
        400: {"description": "Item is referenced by sales", "model": ErrorResponse},
        404: {"description": "Item not found", "model": ErrorResponse},
    },
)
async def delete_item(item_id: str, db: AsyncSession = Depends(get_db_session, scope="function")):
    deleted = await item_service.delete_item(db, item_id)
    return ok(message="Item deleted successfully", data=deleted)
