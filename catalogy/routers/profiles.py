# catalogy/routers/profiles.py
from fastapi import APIRouter, Depends

from catalogy.schemas.profile import PreferencesRead
from catalogy.services.dependencies import get_provisioner
from catalogy.services.profile_service import ProfileProvisioner

router = APIRouter(prefix="/profiles", tags=["Profiles"])


@router.get("/{profile_id}/preferences", response_model=PreferencesRead)
def read_preferences(
    profile_id: str,
    provisioner: ProfileProvisioner = Depends(get_provisioner),
):
    """
    Return the profile's preferences.

    Preferences are best-effort at provisioning time, so a missing record
    is recreated with defaults here. 404 if the profile itself is unknown.
    """
    return provisioner.ensure_preferences(profile_id)
