from enum import Enum
from typing import Optional

from pydantic import BaseModel

# Users live in the identity provider (Firebase Auth + Firestore "users"
# collection); nothing here is a table.


class UserRole(str, Enum):
    EMPLOYEE = "employee"
    ADMIN = "admin"
    MANAGER = "manager"


class UserProfile(BaseModel):
    uid: str
    role: UserRole = UserRole.EMPLOYEE
    display_name: Optional[str] = None
    email: Optional[str] = None
    employee_id: Optional[str] = None
    department: Optional[str] = None

    @classmethod
    def from_firestore(cls, uid: str, data: dict) -> "UserProfile":
        """Build a profile from a Firestore user document; unknown roles read as employee."""
        raw_role = data.get("role") or UserRole.EMPLOYEE.value
        try:
            role = UserRole(raw_role)
        except ValueError:
            role = UserRole.EMPLOYEE
        return cls(
            uid=uid,
            role=role,
            display_name=data.get("displayName"),
            email=data.get("email"),
            employee_id=data.get("employeeId"),
            department=data.get("department"),
        )
