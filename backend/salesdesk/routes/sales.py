"""
SalesDesk Backend — Sales Route Handlers
=========================================

/sales endpoints, all behind the auth guard. Responses carry the
companyName / companyGstNo / itemName / itemHsnCode enrichment.
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from salesdesk.dependencies import get_current_user, get_db_session
from salesdesk.schemas.common import ApiResponse, DeletedOut, ErrorResponse, ok
from salesdesk.schemas.sales import SaleOut, SalesCreate, SalesUpdate
from salesdesk.services.sales_service import sales_service
from salesdesk.validation import validated_body

router = APIRouter(
    prefix="/sales",
    tags=["Sales"],
    dependencies=[Depends(get_current_user)],
    responses={
        401: {"description": "Missing token", "model": ErrorResponse},
        403: {"description": "Invalid or expired token", "model": ErrorResponse},
    },
)


@router.get("", response_model=ApiResponse[List[SaleOut]], response_model_exclude_unset=True)
async def list_sales(db: AsyncSession = Depends(get_db_session, scope="function")):
    sales = await sales_service.list_sales(db)
    return ok(count=len(sales), data=sales)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[SaleOut],
    response_model_exclude_unset=True,
    responses={400: {"description": "Validation error or unknown company/item", "model": ErrorResponse}},
)
async def create_sale(
    payload: SalesCreate = Depends(validated_body(SalesCreate)),
    db: AsyncSession = Depends(get_db_session, scope="function"),
):
    sale = await sales_service.create_sale(db, payload)
    return ok(message="Sale created successfully", data=sale)


@router.get(
    "/{sale_id}",
    response_model=ApiResponse[SaleOut],
    response_model_exclude_unset=True,
    responses={404: {"description": "Sale not found", "model": ErrorResponse}},
)
async def get_sale(sale_id: str, db: AsyncSession = Depends(get_db_session, scope="function")):
    return ok(data=await sales_service.get_sale(db, sale_id))


@router.put(
    "/{sale_id}",
    response_model=ApiResponse[SaleOut],
    response_model_exclude_unset=True,
    responses={
        400: {"description": "Validation error or unknown company/item", "model": ErrorResponse},
        404: {"description": "Sale not found", "model": ErrorResponse},
    },
)
async def update_sale(
    sale_id: str,
    payload: SalesUpdate = Depends(validated_body(SalesUpdate)),
    db: AsyncSession = Depends(get_db_session, scope="function"),
):
    sale = await sales_service.update_sale(db, sale_id, payload)
    if sale is None:
        return ok(message="No changes made")
    return ok(message="Sale updated successfully", data=sale)


@router.delete(
    "/{sale_id}",
    response_model=ApiResponse[DeletedOut],
    response_model_exclude_unset=True,
    responses={404: {"description": "Sale not found", "model": ErrorResponse}},
)
async def delete_sale(sale_id: str, db: AsyncSession = Depends(get_db_session, scope="function")):
    deleted = await sales_service.delete_sale(db, sale_id)
    return ok(message="Sale deleted successfully", data=deleted)
