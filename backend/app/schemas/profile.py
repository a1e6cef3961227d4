"""
Profile Schemas - role-specific payloads accepted at registration and
returned alongside the account
"""

from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import date, datetime
from decimal import Decimal

from app.models.profile import Gender, ParentRelationship


# ============== Create Schemas ==============

class _ProfileCreate(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    middle_name: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = None

    class Config:
        str_strip_whitespace = True
        extra = "ignore"


class StudentProfileCreate(_ProfileCreate):
    """Student registration data"""
    student_id: Optional[str] = Field(None, min_length=1, max_length=50, description="Defaults to admission_number")
    admission_number: str = Field(..., min_length=1, max_length=50)
    admission_date: date
    date_of_birth: date
    gender: Gender
    previous_school: Optional[str] = Field(None, max_length=200)
    medical_info: Optional[str] = None
    emergency_contact_name: Optional[str] = Field(None, max_length=100)
    emergency_contact_phone: Optional[str] = Field(None, max_length=20)
    parent_id: Optional[int] = Field(None, gt=0, description="Existing parent profile to link as primary guardian")


class TeacherProfileCreate(_ProfileCreate):
    """Teacher registration data"""
    employee_id: str = Field(..., min_length=1, max_length=20)
    gender: Gender
    hire_date: date
    date_of_birth: Optional[date] = None
    qualification: Optional[str] = Field(None, max_length=200)
    specialization: Optional[str] = Field(None, max_length=200)
    salary: Optional[Decimal] = Field(None, ge=0)


class ParentProfileCreate(_ProfileCreate):
    """Parent registration data - phone is mandatory for parents"""
    phone: str = Field(..., min_length=1, max_length=20)
    email: Optional[EmailStr] = None
    occupation: Optional[str] = Field(None, max_length=100)
    relationship: ParentRelationship = ParentRelationship.OTHER
    is_primary: bool = False


# ============== Response Schemas ==============

class _ProfileResponse(BaseModel):
    id: int
    user_id: int
    first_name: str
    last_name: str
    middle_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class StudentProfileResponse(_ProfileResponse):
    student_id: str
    admission_number: str
    admission_date: date
    date_of_birth: date
    gender: Gender
    previous_school: Optional[str] = None
    medical_info: Optional[str] = None
    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: Optional[str] = None
    is_active: bool = True


class TeacherProfileResponse(_ProfileResponse):
    employee_id: str
    gender: Gender
    hire_date: date
    date_of_birth: Optional[date] = None
    qualification: Optional[str] = None
    specialization: Optional[str] = None
    salary: Optional[Decimal] = None
    is_active: bool = True


class ParentProfileResponse(_ProfileResponse):
    email: Optional[str] = None
    occupation: Optional[str] = None
    relationship: ParentRelationship
    is_primary: bool = False
