"""
Profile API Endpoints
=====================

Privacy settings for the caller's public page, and the public page itself.

`GET /profile/public/{username}` is the only endpoint in the API that needs
no access token.
"""

from typing import Optional

from fastapi import APIRouter

from lifeos.dependencies import CurrentUser, DBSession
from lifeos.schemas.common import BaseResponse
from lifeos.schemas.profile import ProfileSettingsUpdate, PublicProfileView
from lifeos.services.profile_service import ProfileService
from lifeos.utils.helpers import local_today

router = APIRouter()


@router.get(
    "",
    response_model=BaseResponse[Optional[dict]],
)
async def get_profile_settings(
    current_user: CurrentUser,
    db: DBSession,
):
    """The caller's settings, or `null` before the first save."""
    profile = await ProfileService(db).get_settings(current_user.user_id)
    return BaseResponse(data=profile.to_api_dict() if profile else None)


@router.put(
    "",
    response_model=BaseResponse[dict],
)
async def save_profile_settings(
    settings_data: ProfileSettingsUpdate,
    current_user: CurrentUser,
    db: DBSession,
):
    """
    Save privacy settings.

    **Errors:**
    - 400 `VALIDATION_ERROR` (field `username`): missing, too short or
      invalid characters
    - 409 `PROFILE_002` (field `username`): taken by someone else
    """
    profile = await ProfileService(db).save_settings(current_user.user_id, settings_data)
    return BaseResponse(data=profile.to_api_dict(), message="Settings saved")


@router.get(
    "/public/{username}",
    response_model=BaseResponse[PublicProfileView],
)
async def get_public_profile(
    username: str,
    db: DBSession,
):
    """Public page for a username; private and unknown profiles are 404."""
    view = await ProfileService(db).public_view(username, local_today())
    return BaseResponse(data=view)
