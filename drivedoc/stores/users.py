"""
User storage backed by the `users` collection.

Push subscriptions live on the user record as a list keyed by endpoint:
no two entries share an endpoint.
"""

from __future__ import annotations

from typing import List, Optional

from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from ..db import USERS
from ..models.user import PushSubscription, User
from ..utils.exceptions import ConflictError
from ..utils.logger import get_logger
from .base import to_object_id

logger = get_logger(__name__)


class UserStore:
    def __init__(self, db: Database):
        self.collection = db[USERS]

    def get_by_id(self, user_id: str) -> Optional[User]:
        oid = to_object_id(user_id)
        if oid is None:
            return None
        return User.from_mongo(self.collection.find_one({"_id": oid}))

    def get_by_email(self, email: str) -> Optional[User]:
        return User.from_mongo(self.collection.find_one({"email": email.lower()}))

    def create(self, user: User) -> User:
        """Insert a new user. Email must be unique (case-insensitive)."""
        data = user.to_mongo()
        data["email"] = str(user.email).lower()
        try:
            result = self.collection.insert_one(data)
        except DuplicateKeyError:
            raise ConflictError("User already exists with this email")
        return user.model_copy(update={"id": str(result.inserted_id), "email": data["email"]})

    def delete(self, user_id: str) -> bool:
        oid = to_object_id(user_id)
        if oid is None:
            return False
        return self.collection.delete_one({"_id": oid}).deleted_count == 1

    def _save_subscriptions(self, user_id: str, subs: List[PushSubscription]) -> None:
        self.collection.update_one(
            {"_id": to_object_id(user_id)},
            {"$set": {"pushSubscriptions": [s.model_dump(by_alias=True) for s in subs]}},
        )

    def upsert_subscription(self, user_id: str, endpoint: str, keys: dict) -> Optional[PushSubscription]:
        """Add or refresh a subscription; it is (re-)enabled either way."""
        user = self.get_by_id(user_id)
        if user is None:
            return None
        subs = [s for s in user.push_subscriptions if s.endpoint != endpoint]
        sub = PushSubscription(endpoint=endpoint, keys=keys, enabled=True)
        subs.append(sub)
        self._save_subscriptions(user_id, subs)
        logger.info("Push subscription saved", user_id=user_id, total=len(subs))
        return sub

    def set_subscription_enabled(self, user_id: str, endpoint: str, enabled: bool) -> bool:
        """Toggle delivery for one endpoint. False when the endpoint is unknown."""
        user = self.get_by_id(user_id)
        if user is None:
            return False
        found = False
        for sub in user.push_subscriptions:
            if sub.endpoint == endpoint:
                sub.enabled = enabled
                found = True
        if found:
            self._save_subscriptions(user_id, user.push_subscriptions)
        return found

    def remove_subscription(self, user_id: str, endpoint: str) -> bool:
        user = self.get_by_id(user_id)
        if user is None:
            return False
        subs = [s for s in user.push_subscriptions if s.endpoint != endpoint]
        if len(subs) == len(user.push_subscriptions):
            return False
        self._save_subscriptions(user_id, subs)
        return True

    def enabled_subscriptions(self, user_id: str) -> List[PushSubscription]:
        """Enabled subscriptions of a user; empty when the user no longer exists."""
        user = self.get_by_id(user_id)
        return user.enabled_subscriptions() if user else []
