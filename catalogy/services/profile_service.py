# catalogy/services/profile_service.py
import logging

from catalogy.core.errors import (
    ConflictError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from catalogy.models.profile import Preferences, Profile
from catalogy.repositories.document_store import DocumentStore
from catalogy.schemas.profile import ProvisionResult

logger = logging.getLogger(__name__)

DEFAULT_FIRST_NAME = "Usuario"


def parse_full_name(full_name) -> tuple[str, str]:
    """
    Split a display name into (first_name, last_name).

    - first token -> first_name ("Usuario" if the name is missing/blank)
    - remaining tokens joined by one space -> last_name ("" if none)
    """
    if not isinstance(full_name, str):
        return DEFAULT_FIRST_NAME, ""

    parts = full_name.split()
    if not parts:
        return DEFAULT_FIRST_NAME, ""
    return parts[0], " ".join(parts[1:])


class ProfileProvisioner:
    """
    Creates the Profile (+ Preferences) mirror of a newly created account.

    Responsibilities:
      - idempotent on the account id: the event source delivers
        at-least-once, so redeliveries must be harmless
      - Profile is the durable outcome; Preferences is best-effort
    """

    def __init__(self, store: DocumentStore, default_locale: str = "es"):
        self.store = store
        self.default_locale = default_locale

    def provision(
        self,
        account_id: str | None,
        email: str | None,
        full_name=None,
    ) -> ProvisionResult:
        """
        Provision the profile for `account_id`.

        Raises:
            ValidationError: if account_id or email is empty.
            StorageError: if the profile lookup or write fails.
        """
        if not account_id or not email:
            raise ValidationError("Missing required user data (id or email)")

        if self.store.get(Profile, {"id": account_id}) is not None:
            logger.info("Profile already exists for user: %s", account_id)
            return self._already_provisioned(account_id)

        first_name, last_name = parse_full_name(full_name)
        profile = Profile(
            id=account_id,
            first_name=first_name,
            last_name=last_name,
            email=email,
            email_verified=False,
            role="user",
            enabled=True,
            active=True,
        )

        try:
            self.store.create(profile)
        except ConflictError:
            # A concurrent redelivery created it between our read and write.
            logger.info("Profile created concurrently for user: %s", account_id)
            return self._already_provisioned(account_id)

        logger.info("Profile created: %s", account_id)
        self._create_preferences(account_id)

        return ProvisionResult(
            message="Profile created successfully",
            profile_id=account_id,
            created=True,
        )

    def ensure_preferences(self, profile_id: str) -> Preferences:
        """
        Return the profile's preferences, recreating them if they are gone.

        Raises:
            NotFoundError: if the profile does not exist.
        """
        if self.store.get(Profile, {"id": profile_id}) is None:
            raise NotFoundError("Profile not found")

        existing = self.store.query(
            Preferences, equals={"profile_id": profile_id}, limit=1
        )
        if existing:
            return existing[0]

        logger.info("Recreating missing preferences for profile: %s", profile_id)
        return self.store.create(self._default_preferences(profile_id))

    # ----- helpers -----

    def _default_preferences(self, profile_id: str) -> Preferences:
        return Preferences(
            profile_id=profile_id,
            theme="system",
            locale=self.default_locale,
            enabled=True,
            flags={},
        )

    def _create_preferences(self, profile_id: str) -> None:
        try:
            self.store.create(self._default_preferences(profile_id))
        except (ConflictError, StorageError) as e:
            # Profile is already created; preferences can be rebuilt later.
            logger.error("Failed to create preferences for %s: %s", profile_id, e)
            return
        logger.info("User preferences created for profile: %s", profile_id)

    @staticmethod
    def _already_provisioned(account_id: str) -> ProvisionResult:
        return ProvisionResult(
            message="Profile already exists",
            profile_id=account_id,
            created=False,
        )
