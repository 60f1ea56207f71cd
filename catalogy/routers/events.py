# catalogy/routers/events.py
from fastapi import APIRouter, Depends

from catalogy.schemas.profile import AccountCreatedEvent, ProvisionResult
from catalogy.services.dependencies import get_provisioner
from catalogy.services.profile_service import ProfileProvisioner

router = APIRouter(prefix="/events", tags=["Events"])


@router.post("/account-created", response_model=ProvisionResult)
def on_account_created(
    event: AccountCreatedEvent,
    provisioner: ProfileProvisioner = Depends(get_provisioner),
):
    """
    Provision the profile of a newly created account.

    Delivery is at-least-once: redeliveries of the same event answer
    "Profile already exists" without writing anything.

    Responses:
      - 200: {ok: true, message, profileId}
      - 400: missing id/email
      - 500: storage or configuration error
    """
    return provisioner.provision(event.id, event.email, event.name)
