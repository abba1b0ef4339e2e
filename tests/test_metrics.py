"""Tests for profile metric calculations."""

import pytest

from nutrivision.domain.profile import ActivityLevel, Gender, Goal
from nutrivision.services.metrics import bmi_category, compute_metrics
from nutrivision.services.profiles import ProfileService
from tests.conftest import InMemoryProfileRepository, make_profile


def test_compute_metrics_for_sedentary_male_losing_weight() -> None:
    result = compute_metrics(make_profile())

    assert result is not None
    assert result.bmi == 22.86
    assert result.bmr == 1673.75
    assert result.tdee == pytest.approx(round(1673.75 * 1.2, 2) - 500)


def test_compute_metrics_female_offset() -> None:
    result = compute_metrics(make_profile(gender=Gender.FEMALE))

    assert result is not None
    assert result.bmr == 1507.75


@pytest.mark.parametrize(
    ("activity_level", "goal", "expected"),
    [
        (ActivityLevel.LIGHTLY_ACTIVE, Goal.MAINTAIN_WEIGHT, 1673.75 * 1.375),
        (ActivityLevel.MODERATELY_ACTIVE, Goal.GAIN_WEIGHT, 1673.75 * 1.55 + 500),
        (ActivityLevel.VERY_ACTIVE, Goal.MAINTAIN_WEIGHT, 1673.75 * 1.725),
        (ActivityLevel.SUPER_ACTIVE, Goal.LOSE_WEIGHT, 1673.75 * 1.9 - 500),
    ],
)
def test_compute_metrics_applies_activity_and_goal(
    activity_level: ActivityLevel, goal: Goal, expected: float
) -> None:
    result = compute_metrics(make_profile(activity_level=activity_level, goal=goal))

    assert result is not None
    assert result.tdee == pytest.approx(expected, abs=0.01)


def test_compute_metrics_requires_profile() -> None:
    assert compute_metrics(None) is None


@pytest.mark.parametrize("field_name", ["weight", "height", "age"])
def test_compute_metrics_rejects_zero_fields(field_name: str) -> None:
    assert compute_metrics(make_profile(**{field_name: 0})) is None


def test_bmi_category_boundaries() -> None:
    assert bmi_category(18.4) == "Underweight"
    assert bmi_category(18.5) == "Normal"
    assert bmi_category(24.9) == "Overweight"
    assert bmi_category(29.9) == "Obese"


def test_profile_service_recomputes_only_for_new_profile() -> None:
    service = ProfileService(InMemoryProfileRepository())
    profile = make_profile()

    first = service.calculations(profile)
    second = service.calculations(profile)
    replaced = service.calculations(make_profile(weight=80))

    assert first is second
    assert replaced is not None
    assert replaced.bmr == 1773.75


def test_profile_service_load_falls_back_on_storage_error() -> None:
    service = ProfileService(InMemoryProfileRepository(fail=True))

    assert service.load() is None
    service.save(make_profile())
