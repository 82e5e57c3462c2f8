from pydantic import BaseModel, StrictInt, constr
from typing import Literal, Optional

AdminStatus = Literal["Active", "Disabled"]
Email = constr(strip_whitespace=True, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$", max_length=255)


class CreateAdminRequest(BaseModel):
    # any "role" in the body is ignored: roles are derived from the email
    name: constr(strip_whitespace=True, min_length=1, max_length=100)
    email: Email
    password: constr(min_length=6, max_length=128)
    status: AdminStatus = "Active"


class UpdateAdminRequest(BaseModel):
    name: Optional[constr(strip_whitespace=True, min_length=1, max_length=100)] = None
    email: Optional[Email] = None
    status: Optional[AdminStatus] = None


class BlockCustomerRequest(BaseModel):
    reason: Optional[str] = None


class SuspendCustomerRequest(BaseModel):
    reason: Optional[str] = None
    days: Optional[StrictInt] = None
