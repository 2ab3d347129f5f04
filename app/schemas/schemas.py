"""
Pydantic Schemas - entity data types.

All schemas in one file for simplicity. Attributes are snake_case and
serialize to camelCase aliases (`num_employees` <-> `numEmployees`), the
field names callers use in create/update payloads.
"""

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UpdateModel(CamelModel):
    """Partial update payload: unknown fields are rejected, unset fields are left alone."""
    model_config = ConfigDict(extra="forbid")


# ============================================================
# COMPANY SCHEMAS
# ============================================================

class CompanyCreate(CamelModel):
    handle: str = Field(..., min_length=1, max_length=25)
    name: str = Field(..., min_length=1)
    description: str
    num_employees: Optional[int] = Field(None, ge=0)
    logo_url: Optional[str] = None

class CompanyUpdate(UpdateModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    num_employees: Optional[int] = Field(None, ge=0)
    logo_url: Optional[str] = None

class Company(CamelModel):
    handle: str
    name: str
    description: str
    num_employees: Optional[int] = None
    logo_url: Optional[str] = None


# ============================================================
# JOB SCHEMAS
# ============================================================

class JobCreate(CamelModel):
    title: str = Field(..., min_length=1)
    salary: Optional[int] = Field(None, ge=0)
    equity: Optional[Decimal] = Field(None, ge=0, le=1)
    company_handle: str

class JobUpdate(UpdateModel):
    title: Optional[str] = Field(None, min_length=1)
    salary: Optional[int] = Field(None, ge=0)
    equity: Optional[Decimal] = Field(None, ge=0, le=1)

class JobSummary(CamelModel):
    id: int
    title: str
    salary: Optional[int] = None
    equity: Optional[Decimal] = None

class Job(JobSummary):
    company_handle: str

class JobListing(Job):
    company_name: str

class JobDetail(JobSummary):
    company: Company

class CompanyDetail(Company):
    jobs: List[JobSummary] = []


# ============================================================
# USER SCHEMAS
# ============================================================

class UserRegister(CamelModel):
    username: str = Field(..., min_length=1, max_length=25)
    password: str = Field(..., min_length=1)
    first_name: str
    last_name: str
    email: EmailStr
    is_admin: bool = False

class UserUpdate(UpdateModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    password: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    is_admin: Optional[bool] = None

class User(CamelModel):
    username: str
    first_name: str
    last_name: str
    email: str
    is_admin: bool

class UserDetail(User):
    applications: List[int] = []
