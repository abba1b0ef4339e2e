"""Local JSON file persistence for the profile and meal log."""

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from nutrivision.domain.errors import PersistenceFailureError
from nutrivision.domain.meals import Meal
from nutrivision.domain.profile import UserProfile
from nutrivision.services.meals import MealLogRepository
from nutrivision.services.profiles import ProfileRepository

MEALS_STORAGE_KEY = "nutrivision-meals"
USER_PROFILE_STORAGE_KEY = "nutrivision-user-profile"

_MEAL_LIST = TypeAdapter(list[Meal])

_logger = logging.getLogger(__name__)


@dataclass
class JsonFileStore:
    """Key-value store keeping one ``<key>.json`` file per key."""

    directory: Path

    def read(self, key: str) -> str | None:
        """Return the stored text, or None when the key is absent."""
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise PersistenceFailureError(f"Could not read {path}") from exc

    def write(self, key: str, text: str) -> None:
        """Replace the stored text atomically."""
        path = self._path(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(text)
            Path(tmp_name).replace(path)
        except OSError as exc:
            raise PersistenceFailureError(f"Could not write {path}") from exc

    def delete(self, key: str) -> None:
        """Remove the key; missing keys are ignored."""
        path = self._path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise PersistenceFailureError(f"Could not delete {path}") from exc

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"


@dataclass
class LocalProfileRepository(ProfileRepository):
    """Profile repository on top of a JSON file store."""

    store: JsonFileStore
    key: str = USER_PROFILE_STORAGE_KEY

    def load_profile(self) -> UserProfile | None:
        """Return the stored profile, if any."""
        raw = self.store.read(self.key)
        if raw is None:
            return None
        try:
            payload = json.loads(raw)
            if payload is None:
                return None
            return UserProfile.model_validate(payload)
        except (json.JSONDecodeError, ValidationError) as exc:
            _logger.warning("Stored user profile is unreadable: %s", exc)
            raise PersistenceFailureError("Stored user profile is corrupt") from exc

    def save_profile(self, profile: UserProfile | None) -> None:
        """Store the profile, or remove the record when None."""
        if profile is None:
            self.store.delete(self.key)
            return
        self.store.write(self.key, profile.model_dump_json())


@dataclass
class LocalMealLogRepository(MealLogRepository):
    """Meal log repository on top of a JSON file store."""

    store: JsonFileStore
    key: str = MEALS_STORAGE_KEY

    def load_meals(self) -> list[Meal]:
        """Return the stored meals in insertion order."""
        raw = self.store.read(self.key)
        if raw is None:
            return []
        try:
            return _MEAL_LIST.validate_json(raw)
        except ValidationError as exc:
            _logger.warning("Stored meal log is unreadable: %s", exc)
            raise PersistenceFailureError("Stored meal log is corrupt") from exc

    def save_meals(self, meals: list[Meal]) -> None:
        """Replace the stored meal log."""
        self.store.write(self.key, _MEAL_LIST.dump_json(meals).decode("utf-8"))
