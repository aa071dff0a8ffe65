import logging
from typing import Annotated

from fastapi import Depends, Request
from sqlmodel import Session

from core.config import ADMIN_ROLES
from core.errors import Forbidden, NotFound, Unauthenticated
from core.firebase import get_firestore_client, verify_id_token
from db.session import get_session
from models.user import UserProfile
from services.attendance_service import AttendanceService
from services.user_directory import FirestoreUserDirectory, UserDirectory

logger = logging.getLogger(__name__)


def get_user_directory() -> UserDirectory:
    return FirestoreUserDirectory(get_firestore_client())


def get_token_uid(request: Request) -> str:
    """Verify the bearer Firebase ID token and return its uid."""

    # 1) Extract & Analyze Authorization Header
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith("Bearer "):
        raise Unauthenticated("Unauthorized: No token provided")
    token = auth_header.split(" ", 1)[1].strip()

    # 2) Verify This Points to a Real User Account
    try:
        decoded = verify_id_token(token)
    except Exception as e:
        # firebase_admin raises a family of auth/value errors; all mean "not authenticated"
        logger.info("Token verification failed: %s", e)
        raise Unauthenticated("Unauthorized: Invalid token") from e

    uid = decoded.get("uid")
    if not uid:
        raise Unauthenticated("Token did not contain uid")
    return uid


def get_current_user(
    uid: Annotated[str, Depends(get_token_uid)],
    users: Annotated[UserDirectory, Depends(get_user_directory)],
) -> UserProfile:
    # 3) Fetch the user profile (role etc.)
    profile = users.get_user(uid)
    if profile is None:
        raise NotFound("User not found")
    return profile


# Admin Role Check Dependency
def require_admin_role(
    current_user: Annotated[UserProfile, Depends(get_current_user)],
) -> UserProfile:
    if current_user.role.value not in ADMIN_ROLES:
        raise Forbidden("Unauthorized: Admin access required")
    return current_user


def get_attendance_service(
    session: Annotated[Session, Depends(get_session)],
    users: Annotated[UserDirectory, Depends(get_user_directory)],
) -> AttendanceService:
    return AttendanceService(session, users)
