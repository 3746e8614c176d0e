from __future__ import annotations

from typing import Optional

from recipe_assistant.core.models import Profile
from recipe_assistant.services.exceptions import StorageError
from .json_repo import JSONUserStore


class JSONUserProfileRepo:
    """Repo for user profile data, one JSON document per user."""

    DOC = "profile"

    def __init__(self, settings):
        self.store = JSONUserStore(settings)

    def load(self, user_id: str) -> Optional[Profile]:
        """Load profile from disk. Returns None if not found."""
        data = self.store.read(user_id, self.DOC)
        if data is None:
            return None
        try:
            return Profile.model_validate(data)
        except ValueError as e:
            raise StorageError(f"Could not load profile for {user_id}: {e}") from e

    def save(self, user_id: str, profile: Profile) -> None:
        self.store.write(user_id, self.DOC, profile.model_dump(mode="json", by_alias=True))
