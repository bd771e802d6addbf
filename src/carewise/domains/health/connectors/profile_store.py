"""Profile store — persists the single current assessment in a key-value repository.

The profile is kept as its wire-form JSON under one key, overwritten as a
whole on every save. The evaluator never reads from here; callers load a
profile and hand it over by value.
"""

from __future__ import annotations

import json
import logging

from carewise.core.storage.encryption import EncryptionError
from carewise.core.storage.repository import KeyValueRepository, RepositoryError
from carewise.domains.health.domain_logic.intake import (
    ProfileValidationError,
    parse_health_profile,
    profile_to_dict,
)
from carewise.domains.health.domain_logic.profile_models import HealthProfile

logger = logging.getLogger(__name__)

DEFAULT_PROFILE_KEY = "health_data"


class ProfileStoreError(Exception):
    """Raised when a stored profile cannot be read back."""


class HealthProfileStore:
    """HealthProfileSource backed by a ``KeyValueRepository``.

    Usage::

        store = HealthProfileStore(InMemoryKeyValueRepository())
        store.save(profile)
        store.load()  # -> HealthProfile
    """

    def __init__(self, repository: KeyValueRepository, key: str = DEFAULT_PROFILE_KEY) -> None:
        self._repo = repository
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> HealthProfile | None:
        """Return the stored profile, or None if nothing has been saved.

        Raises:
            ProfileStoreError: If the stored record cannot be read, decrypted or parsed.
        """
        try:
            raw = self._repo.get(self._key)
        except (EncryptionError, RepositoryError) as exc:
            raise ProfileStoreError(f"Stored profile under {self._key!r} is unreadable") from exc
        if raw is None:
            return None

        try:
            payload = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise ProfileStoreError(f"Stored profile under {self._key!r} is not valid JSON") from exc

        try:
            return parse_health_profile(payload)
        except ProfileValidationError as exc:
            raise ProfileStoreError(
                f"Stored profile under {self._key!r} is invalid: {exc}"
            ) from exc

    def save(self, profile: HealthProfile) -> None:
        """Overwrite the stored profile.

        Raises:
            ProfileStoreError: If the repository rejects the write.
        """
        data = json.dumps(profile_to_dict(profile), separators=(",", ":"))
        try:
            self._repo.put(self._key, data.encode("utf-8"))
        except (EncryptionError, RepositoryError) as exc:
            raise ProfileStoreError(f"Could not save profile under {self._key!r}: {exc}") from exc
        logger.info("Saved health profile under %s", self._key)

    def clear(self) -> bool:
        try:
            removed = self._repo.delete(self._key)
        except RepositoryError as exc:
            raise ProfileStoreError(f"Could not clear profile under {self._key!r}: {exc}") from exc
        if removed:
            logger.info("Cleared health profile under %s", self._key)
        return removed

    def has_profile(self) -> bool:
        """Whether a record exists under the key, readable or not."""
        try:
            return self._repo.get(self._key) is not None
        except EncryptionError:
            return True
        except RepositoryError as exc:
            raise ProfileStoreError(f"Could not check profile under {self._key!r}: {exc}") from exc
