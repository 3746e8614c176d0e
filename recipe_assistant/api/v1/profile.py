from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from recipe_assistant.api.deps import get_profile_repo, get_user_id
from recipe_assistant.core.models import Profile, ProfileResponse
from recipe_assistant.services.repo.profile_repo import JSONUserProfileRepo

router = APIRouter(tags=["profile"])
logger = logging.getLogger(__name__)

# ---- Routes ------------------------------------------------------------------

@router.get("/api/profile", response_model=ProfileResponse)
def get_profile(
    user_id: str = Depends(get_user_id),
    repo: JSONUserProfileRepo = Depends(get_profile_repo),
):
    # Defaults when absent; nothing is written until the user saves.
    profile = repo.load(user_id) or Profile()
    return ProfileResponse(profile=profile)


@router.put("/api/profile", response_model=ProfileResponse)
def update_profile(
    profile: Profile,
    user_id: str = Depends(get_user_id),
    repo: JSONUserProfileRepo = Depends(get_profile_repo),
):
    repo.save(user_id, profile)
    logger.info(
        "Saved profile for %s (%d allergies, %d dietary restrictions)",
        user_id, len(profile.preferences.allergies), len(profile.preferences.dietary_restrictions),
    )
    return ProfileResponse(profile=profile)
