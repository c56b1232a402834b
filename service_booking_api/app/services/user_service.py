"""
Business logic for users.

``UserService`` registers customers, authenticates them, creates
administrator accounts and lists users for the admin panel.  Password
hashes never leave this module.
"""

import logging
from typing import List, Optional

from pymongo import DESCENDING
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from ..core.db import USERS, in_threadpool, utcnow
from ..core.errors import AuthenticationError, BadRequestError
from ..core.security import create_access_token, hash_password, verify_password
from ..schemas.user import Role, TokenResponse, UserLogin, UserRead, UserRegister


logger = logging.getLogger(__name__)


def user_to_read(doc: dict) -> UserRead:
    return UserRead(
        id=str(doc["_id"]),
        name=doc["name"],
        email=doc["email"],
        phone=doc.get("phone"),
        role=doc.get("role", Role.USER.value),
        created_at=doc["created_at"],
    )


def issue_token(doc: dict) -> TokenResponse:
    return TokenResponse(token=create_access_token({"sub": str(doc["_id"])}), user=user_to_read(doc))


class UserService:
    """Account registration, login and listing."""

    def __init__(self, db: Database) -> None:
        self.collection = db[USERS]

    def _insert_user(
        self,
        name: str,
        email: str,
        password: str,
        phone: Optional[str] = None,
        role: Role = Role.USER,
    ) -> dict:
        """Insert a user and return the stored document.

        Emails are stored lower-cased; a duplicate raises
        ``BadRequestError``.
        """
        email = email.lower()
        doc = {
            "name": name,
            "email": email,
            "password": hash_password(password),
            "phone": phone,
            "role": role.value,
            "created_at": utcnow(),
        }
        try:
            result = self.collection.insert_one(doc)
        except DuplicateKeyError:
            raise BadRequestError("User already exists") from None
        doc["_id"] = result.inserted_id
        logger.info("Registered %s %s", role.value, email)
        return doc

    create_user = in_threadpool(_insert_user)

    @in_threadpool
    def register(self, data: UserRegister) -> TokenResponse:
        return issue_token(self._insert_user(data.name, data.email, data.password, data.phone))

    @in_threadpool
    def login(self, data: UserLogin) -> TokenResponse:
        doc = self.collection.find_one({"email": data.email.lower()})
        if not doc or not verify_password(data.password, doc.get("password")):
            logger.info("Failed login for %s", data.email)
            raise AuthenticationError("Invalid email or password")
        return issue_token(doc)

    @in_threadpool
    def list_users(self) -> List[UserRead]:
        """Return all users, newest first, without credentials."""
        cursor = self.collection.find({}, {"password": 0}).sort("created_at", DESCENDING)
        return [user_to_read(doc) for doc in cursor]
