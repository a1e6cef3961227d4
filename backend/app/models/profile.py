"""
Role-specific profile models
- Student, Teacher, Parent: one row per account, keyed by users.id
- StudentParent: student <-> parent link
"""

from sqlalchemy import (
    Column, String, Boolean, DateTime, Date, Integer, Numeric, Text, ForeignKey,
    Enum as SQLEnum, UniqueConstraint,
)
from datetime import datetime
import enum

from app.core.database import Base


class Gender(str, enum.Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


class ParentRelationship(str, enum.Enum):
    FATHER = "Father"
    MOTHER = "Mother"
    GUARDIAN = "Guardian"
    OTHER = "Other"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Student(Base):
    """Student profile"""
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False, index=True)
    student_id = Column(String(50), unique=True, nullable=False)
    admission_number = Column(String(50), unique=True, nullable=False)
    admission_date = Column(Date, nullable=False)

    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    middle_name = Column(String(100), nullable=True)
    date_of_birth = Column(Date, nullable=False)
    gender = Column(SQLEnum(Gender, values_callable=_enum_values), nullable=False)
    phone = Column(String(20), nullable=True)
    address = Column(Text, nullable=True)

    previous_school = Column(String(200), nullable=True)
    medical_info = Column(Text, nullable=True)
    emergency_contact_name = Column(String(100), nullable=True)
    emergency_contact_phone = Column(String(20), nullable=True)

    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Student {self.student_id}>"


class Teacher(Base):
    """Teacher profile"""
    __tablename__ = "teachers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False, index=True)
    employee_id = Column(String(20), unique=True, nullable=False)

    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    middle_name = Column(String(100), nullable=True)
    date_of_birth = Column(Date, nullable=True)
    gender = Column(SQLEnum(Gender, values_callable=_enum_values), nullable=False)
    phone = Column(String(20), nullable=True)
    address = Column(Text, nullable=True)

    qualification = Column(String(200), nullable=True)
    specialization = Column(String(200), nullable=True)
    hire_date = Column(Date, nullable=False)
    salary = Column(Numeric(12, 2), nullable=True)

    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Teacher {self.employee_id}>"


class Parent(Base):
    """Parent / guardian profile"""
    __tablename__ = "parents"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False, index=True)

    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    middle_name = Column(String(100), nullable=True)
    phone = Column(String(20), nullable=False)
    email = Column(String(255), nullable=True)  # contact address, may differ from login email
    address = Column(Text, nullable=True)
    occupation = Column(String(100), nullable=True)
    relationship = Column(
        SQLEnum(ParentRelationship, values_callable=_enum_values),
        default=ParentRelationship.OTHER,
        nullable=False,
    )
    is_primary = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Parent {self.first_name} {self.last_name}>"


class StudentParent(Base):
    """Links a student to a parent"""
    __tablename__ = "student_parents"
    __table_args__ = (
        UniqueConstraint("student_id", "parent_id", name="uq_student_parent"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False, index=True)
    parent_id = Column(Integer, ForeignKey("parents.id"), nullable=False, index=True)
    relationship = Column(
        SQLEnum(ParentRelationship, values_callable=_enum_values),
        default=ParentRelationship.GUARDIAN,
        nullable=False,
    )
    is_primary = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
