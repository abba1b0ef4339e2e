"""User profile persistence and derived metrics."""

import logging
from dataclasses import dataclass
from typing import Protocol

from nutrivision.domain.errors import PersistenceFailureError
from nutrivision.domain.profile import UserCalculations, UserProfile
from nutrivision.services.metrics import compute_metrics

_logger = logging.getLogger(__name__)


class ProfileRepository(Protocol):
    """Persistence interface for the user profile."""

    def load_profile(self) -> UserProfile | None:
        """Return the stored profile, if any."""

    def save_profile(self, profile: UserProfile | None) -> None:
        """Store the profile; None removes the stored record."""


@dataclass
class ProfileService:
    """Loads and saves the profile and caches its metrics."""

    repository: ProfileRepository
    _cached_for: UserProfile | None = None
    _cached: UserCalculations | None = None

    def load(self) -> UserProfile | None:
        """Return the persisted profile, falling back to none."""
        try:
            return self.repository.load_profile()
        except PersistenceFailureError:
            _logger.exception("Could not load user profile from storage")
            return None

    def save(self, profile: UserProfile | None) -> None:
        """Persist the profile, or remove it when None."""
        try:
            self.repository.save_profile(profile)
        except PersistenceFailureError:
            _logger.exception("Could not save user profile to storage")

    def calculations(self, profile: UserProfile | None) -> UserCalculations | None:
        """Return metrics for ``profile``, recomputed only when it is replaced."""
        if profile is None:
            return None
        if profile is not self._cached_for:
            self._cached_for = profile
            self._cached = compute_metrics(profile)
        return self._cached
