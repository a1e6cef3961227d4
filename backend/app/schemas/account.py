"""
Account administration schemas
"""

from pydantic import BaseModel
from typing import List, Optional

from app.schemas.auth import AccountResponse, MessageResponse, AccountProfile
from app.schemas.profile import StudentProfileResponse


class AccountListData(BaseModel):
    items: List[AccountResponse]
    total: int
    page: int
    page_size: int


class StudentDirectoryEntry(BaseModel):
    account_id: int
    email: str
    is_active: bool
    profile: StudentProfileResponse


class StudentDirectoryData(BaseModel):
    items: List[StudentDirectoryEntry]
    total: int
    page: int
    page_size: int
    search: Optional[str] = None


class AccountListResponse(MessageResponse):
    data: AccountListData


class StudentDirectoryResponse(MessageResponse):
    data: StudentDirectoryData


class AccountDetailResponse(MessageResponse):
    data: AccountProfile


class AccountStatusResponse(MessageResponse):
    data: AccountResponse
