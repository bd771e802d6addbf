"""Health profile connectors — where the current assessment comes from."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from carewise.domains.health.domain_logic.profile_models import HealthProfile


@runtime_checkable
class HealthProfileSource(Protocol):
    """Abstract interface for reading and replacing the current assessment.

    Tools call these methods without knowing where the profile is kept.
    """

    def load(self) -> HealthProfile | None:
        """The current profile, or None when no assessment has been completed."""
        ...

    def save(self, profile: HealthProfile) -> None:
        """Replace the current profile wholesale."""
        ...

    def clear(self) -> bool:
        """Forget the current profile; True if one existed."""
        ...
