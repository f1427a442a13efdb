"""Suitability rules.

Each rule checks one aspect of a forecast sample against an activity profile
and reports a `RuleResult`. Rules are independent of each other; the
classifier runs all of them and collects every failure.

| Rule | Passes when | Reason on failure |
|------|-------------|-------------------|
| temperature | min_temperature_f <= temperature_f <= max_temperature_f | temperature out of range |
| wind | wind_speed_mph <= max_wind_mph | wind too high |
| condition | no exclusion keyword in lower-cased condition_text | adverse precipitation/condition |
| precipitation_probability | opt-in: probability <= max_precipitation_probability_pct | precipitation likely |
| precipitation_amount | opt-in: amount <= max_precipitation_amount_in | precipitation amount too high |
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Any

from pydantic import BaseModel

from outdoor_advisory.models.activity import ActivityProfile
from outdoor_advisory.models.weather import ForecastSample


class RuleType(str, Enum):
    """Types of suitability rules."""

    TEMPERATURE = "temperature"
    WIND = "wind"
    CONDITION = "condition"
    PRECIPITATION_PROBABILITY = "precipitation_probability"
    PRECIPITATION_AMOUNT = "precipitation_amount"


REASONS: dict[RuleType, str] = {
    RuleType.TEMPERATURE: "temperature out of range",
    RuleType.WIND: "wind too high",
    RuleType.CONDITION: "adverse precipitation/condition",
    RuleType.PRECIPITATION_PROBABILITY: "precipitation likely",
    RuleType.PRECIPITATION_AMOUNT: "precipitation amount too high",
}


class RuleResult(BaseModel):
    """Result of evaluating a single rule."""

    rule: RuleType
    passed: bool
    actual_value: Any
    threshold: Any
    message: str

    @property
    def reason(self) -> str:
        """Short reason reported in a verdict when this rule fails."""
        return REASONS[self.rule]


Rule = Callable[[ForecastSample, ActivityProfile], RuleResult]


def check_temperature(sample: ForecastSample, profile: ActivityProfile) -> RuleResult:
    """Temperature must lie within the profile's range (inclusive)."""
    passed = profile.is_temperature_acceptable(sample.temperature_f)
    low, high = profile.min_temperature_f, profile.max_temperature_f
    return RuleResult(
        rule=RuleType.TEMPERATURE,
        passed=passed,
        actual_value=sample.temperature_f,
        threshold=(low, high),
        message=(
            f"temperature {sample.temperature_f:g}°F "
            f"{'within' if passed else 'outside'} {low:g}-{high:g}°F"
        ),
    )


def check_wind(sample: ForecastSample, profile: ActivityProfile) -> RuleResult:
    """Wind speed must not exceed the profile's limit."""
    passed = profile.is_wind_acceptable(sample.wind_speed_mph)
    return RuleResult(
        rule=RuleType.WIND,
        passed=passed,
        actual_value=sample.wind_speed_mph,
        threshold=profile.max_wind_mph,
        message=(
            f"wind {sample.wind_speed_mph:g} mph "
            f"{'at or below' if passed else 'above'} {profile.max_wind_mph:g} mph"
        ),
    )


def check_condition(sample: ForecastSample, profile: ActivityProfile) -> RuleResult:
    """Condition text must not contain any exclusion keyword."""
    matched = profile.matching_keywords(sample.condition_text)
    if matched:
        message = f"condition '{sample.condition_text}' matches {', '.join(matched)}"
    else:
        message = f"condition '{sample.condition_text}' acceptable"
    return RuleResult(
        rule=RuleType.CONDITION,
        passed=not matched,
        actual_value=sample.condition_text,
        threshold=profile.condition_keywords,
        message=message,
    )


def check_precipitation_probability(
    sample: ForecastSample, profile: ActivityProfile
) -> RuleResult:
    """Precipitation probability must not exceed the profile's limit."""
    limit = profile.max_precipitation_probability_pct
    passed = limit is None or sample.precipitation_probability_pct <= limit
    return RuleResult(
        rule=RuleType.PRECIPITATION_PROBABILITY,
        passed=passed,
        actual_value=sample.precipitation_probability_pct,
        threshold=limit,
        message=f"precipitation chance {sample.precipitation_probability_pct}% (limit {limit}%)",
    )


def check_precipitation_amount(
    sample: ForecastSample, profile: ActivityProfile
) -> RuleResult:
    """Precipitation amount must not exceed the profile's limit."""
    limit = profile.max_precipitation_amount_in
    passed = limit is None or sample.precipitation_amount_in <= limit
    return RuleResult(
        rule=RuleType.PRECIPITATION_AMOUNT,
        passed=passed,
        actual_value=sample.precipitation_amount_in,
        threshold=limit,
        message=f"precipitation {sample.precipitation_amount_in:g} in (limit {limit} in)",
    )


def rules_for_profile(profile: ActivityProfile) -> list[Rule]:
    """Get the rules that apply to a profile, in reporting order.

    Temperature, wind and condition rules always apply; the precipitation
    rules only when the profile sets a limit.
    """
    rules: list[Rule] = [check_temperature, check_wind, check_condition]
    if profile.max_precipitation_probability_pct is not None:
        rules.append(check_precipitation_probability)
    if profile.max_precipitation_amount_in is not None:
        rules.append(check_precipitation_amount)
    return rules
