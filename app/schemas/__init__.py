"""
Schemas module - entity data types shared by the services.
"""
from app.schemas.schemas import (
    Company, CompanyCreate, CompanyDetail, CompanyUpdate,
    Job, JobCreate, JobDetail, JobListing, JobSummary, JobUpdate,
    User, UserDetail, UserRegister, UserUpdate,
)

__all__ = [
    "Company", "CompanyCreate", "CompanyDetail", "CompanyUpdate",
    "Job", "JobCreate", "JobDetail", "JobListing", "JobSummary", "JobUpdate",
    "User", "UserDetail", "UserRegister", "UserUpdate",
]
