"""
Account administration endpoints

Every route requires a valid access token; each one adds a role gate.
"""

from fastapi import APIRouter, Depends, Query, Path
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.core.database import get_db
from app.models.role import RoleName
from app.modules.auth.dependencies import (
    AuthContext,
    authenticate,
    admin_only,
    teacher_or_admin,
    owner_or_admin,
)
from app.schemas.account import (
    AccountListResponse,
    AccountListData,
    StudentDirectoryResponse,
    StudentDirectoryData,
    AccountDetailResponse,
    AccountStatusResponse,
)
from app.services.account_service import account_service


router = APIRouter(dependencies=[Depends(authenticate)])


@router.get("", response_model=AccountListResponse, dependencies=[Depends(admin_only)])
async def list_accounts(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    role: Optional[RoleName] = Query(None),
    is_active: Optional[bool] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    """All accounts (Admin only)"""
    items, total = await account_service.list_accounts(
        db, page=page, page_size=page_size, role=role, is_active=is_active
    )
    return AccountListResponse(
        message="Accounts retrieved successfully",
        data=AccountListData(items=items, total=total, page=page, page_size=page_size),
    )


@router.get("/students", response_model=StudentDirectoryResponse, dependencies=[Depends(teacher_or_admin)])
async def list_students(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    search: Optional[str] = Query(None, min_length=1, max_length=100),
    db: AsyncSession = Depends(get_db)
):
    """Student directory (Teacher or Admin)"""
    items, total = await account_service.list_students(
        db, page=page, page_size=page_size, search=search
    )
    return StudentDirectoryResponse(
        message="Students retrieved successfully",
        data=StudentDirectoryData(items=items, total=total, page=page, page_size=page_size, search=search),
    )


@router.get("/{account_id}", response_model=AccountDetailResponse, dependencies=[Depends(owner_or_admin("account_id"))])
async def get_account(
    account_id: int = Path(..., ge=1),
    db: AsyncSession = Depends(get_db)
):
    """One account with its profile (the account itself, or Admin)"""
    data = await account_service.get_account_detail(db, account_id)
    return AccountDetailResponse(message="Account retrieved successfully", data=data)


@router.post("/{account_id}/deactivate", response_model=AccountStatusResponse)
async def deactivate_account(
    account_id: int = Path(..., ge=1),
    auth: AuthContext = Depends(admin_only),
    db: AsyncSession = Depends(get_db)
):
    """Soft delete. The account's tokens stop working on their next use."""
    account = await account_service.set_account_active(db, account_id, False, auth.account_id)
    return AccountStatusResponse(message="Account deactivated successfully", data=account)


@router.post("/{account_id}/activate", response_model=AccountStatusResponse)
async def activate_account(
    account_id: int = Path(..., ge=1),
    auth: AuthContext = Depends(admin_only),
    db: AsyncSession = Depends(get_db)
):
    account = await account_service.set_account_active(db, account_id, True, auth.account_id)
    return AccountStatusResponse(message="Account activated successfully", data=account)
