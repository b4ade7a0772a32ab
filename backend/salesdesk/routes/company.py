"""
SalesDesk Backend — Company Route Handlers
===========================================

What:  /company endpoints. Every route requires a valid token.
How:   Auth guard (router dependency) → body validation → company_service →
       response envelope. Errors are raised, never returned; the handlers
       in main.py render them.

Route Order:
    /stats and /bulk-delete are declared before /{company_id} so the
    literal paths are not captured as ids.
"""

import logging
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
from salesdesk.schemas.company import CompanyCreate, CompanyOut, CompanyUpdate
from salesdesk.services.company_service import company_service
from salesdesk.validation import validated_body

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/company",
    tags=["Company"],
    dependencies=[Depends(get_current_user)],
    responses={
        401: {"description": "Missing token", "model": ErrorResponse},
        403: {"description": "Invalid or expired token", "model": ErrorResponse},
    },
)


@router.get(
    "",
    response_model=ApiResponse[List[CompanyOut]],
    response_model_exclude_unset=True,
    summary="List companies (oldest first)",
)
async def list_companies(db: AsyncSession = Depends(get_db_session, scope="function")):
    companies = await company_service.list_companies(db)
    return ok(count=len(companies), data=companies)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[CompanyOut],
    response_model_exclude_unset=True,
    responses={400: {"description": "Validation error or duplicate GST number", "model": ErrorResponse}},
    summary="Create a company",
)
async def create_company(
    payload: CompanyCreate = Depends(validated_body(CompanyCreate)),
    db: AsyncSession = Depends(get_db_session, scope="function"),
):
    company = await company_service.create_company(db, payload)
    return ok(message="Company created successfully", data=company)


@router.get(
    "/stats",
    response_model=ApiResponse[StatsOut],
    response_model_exclude_unset=True,
    summary="Company counts by status",
)
async def company_stats(db: AsyncSession = Depends(get_db_session, scope="function")):
    return ok(data=await company_service.get_stats(db))


@router.post(
    "/bulk-delete",
    response_model=ApiResponse[BulkDeleteOut],
    response_model_exclude_unset=True,
    summary="Delete several companies",
    description=(
        "Each id is attempted independently. Ids that do not exist or are still "
        "referenced by sales are reported in failedIds; the rest are deleted."
    ),
)
async def bulk_delete_companies(
    payload: BulkDeleteRequest = Depends(validated_body(BulkDeleteRequest)),
    db: AsyncSession = Depends(get_db_session, scope="function"),
):
    result = await company_service.bulk_delete(db, payload.ids)
    return ok(message=f"{result.deleted_count} companies deleted successfully", data=result)


@router.get(
    "/{company_id}",
    response_model=ApiResponse[CompanyOut],
    response_model_exclude_unset=True,
    responses={404: {"description": "Company not found", "model": ErrorResponse}},
    summary="Get a company",
)
async def get_company(company_id: str, db: AsyncSession = Depends(get_db_session, scope="function")):
    return ok(data=await company_service.get_company(db, company_id))


@router.put(
    "/{company_id}",
    response_model=ApiResponse[CompanyOut],
    response_model_exclude_unset=True,
    responses={
        400: {"description": "Validation error or duplicate GST number", "model": ErrorResponse},
        404: {"description": "Company not found", "model": ErrorResponse},
    },
    summary="Replace a company's fields",
)
async def update_company(
    company_id: str,
    payload: CompanyUpdate = Depends(validated_body(CompanyUpdate)),
    db: AsyncSession = Depends(get_db_session, scope="function"),
):
    company = await company_service.update_company(db, company_id, payload)
    if company is None:
        return ok(message="No changes made")
    return ok(message="Company updated successfully", data=company)


@router.delete(
    "/{company_id}",
    response_model=ApiResponse[DeletedOut],
    response_model_exclude_unset=True,
    responses={
        400: {"description": "Company is referenced by sales", "model": ErrorResponse},
        404: {"description": "Company not found", "model": ErrorResponse},
    },
    summary="Delete a company",
)
async def delete_company(company_id: str, db: AsyncSession = Depends(get_db_session, scope="function")):
    deleted = await company_service.delete_company(db, company_id)
    return ok(message="Company deleted successfully", data=deleted)
