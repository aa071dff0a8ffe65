import logging
from typing import List, Optional, Protocol

from core.errors import StorageError
from models.user import UserProfile, UserRole

logger = logging.getLogger(__name__)


class UserDirectory(Protocol):
    """Read-only view of user profiles held by the identity provider."""

    def get_user(self, uid: str) -> Optional[UserProfile]: ...

    def list_users_by_role(self, role: UserRole) -> List[UserProfile]: ...


class FirestoreUserDirectory:
    """User profiles from the Firestore ``users`` collection, keyed by Firebase uid."""

    def __init__(self, client):
        self._users = client.collection("users")

    def get_user(self, uid: str) -> Optional[UserProfile]:
        try:
            snapshot = self._users.document(uid).get()
        except Exception as e:
            logger.exception("Firestore error fetching profile for %s", uid)
            raise StorageError("Could not fetch user profile.") from e

        if not snapshot.exists:
            return None
        return UserProfile.from_firestore(snapshot.id, snapshot.to_dict() or {})

    def list_users_by_role(self, role: UserRole) -> List[UserProfile]:
        try:
            users_stream = self._users.stream()
            profiles = [
                UserProfile.from_firestore(doc.id, doc.to_dict() or {})
                for doc in users_stream
            ]
        except Exception as e:
            logger.exception("Firestore error listing users")
            raise StorageError("Could not retrieve user list.") from e

        # Role is filtered here rather than in the query so that documents
        # without a role field count as employees.
        users_list = [p for p in profiles if p.role == role]
        users_list.sort(key=lambda p: p.display_name or "")
        return users_list
