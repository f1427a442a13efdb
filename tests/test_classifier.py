"""Tests for suitability rules and the classifier."""

from datetime import timedelta

import pytest

from outdoor_advisory.models.activity import DEFAULT_PROFILE, ActivityProfile
from outdoor_advisory.models.weather import AlertSeverity
from outdoor_advisory.rules.classifier import (
    SuitabilityClassifier,
    active_alerts,
    evaluate_sample,
)
from outdoor_advisory.rules.conditions import (
    REASONS,
    RuleType,
    check_condition,
    check_temperature,
    check_wind,
    rules_for_profile,
)

from conftest import BASE_TIME, make_alert, make_sample


class TestRules:
    """Tests for individual rules."""

    @pytest.mark.parametrize(
        ("temperature_f", "passed"),
        [
            (39.9, False),
            (40.0, True),
            (65.0, True),
            (90.0, True),
            (90.1, False),
        ],
    )
    def test_temperature_bounds_inclusive(self, temperature_f: float, passed: bool):
        result = check_temperature(make_sample(BASE_TIME, temperature_f=temperature_f), DEFAULT_PROFILE)
        assert result.passed is passed
        assert result.rule == RuleType.TEMPERATURE
        assert result.threshold == (40.0, 90.0)

    @pytest.mark.parametrize(
        ("wind_speed_mph", "passed"),
        [(0.0, True), (25.0, True), (25.1, False), (30.0, False)],
    )
    def test_wind_limit(self, wind_speed_mph: float, passed: bool):
        result = check_wind(make_sample(BASE_TIME, wind_speed_mph=wind_speed_mph), DEFAULT_PROFILE)
        assert result.passed is passed

    @pytest.mark.parametrize(
        ("condition_text", "passed"),
        [
            ("Sunny", True),
            ("Partly cloudy", True),
            ("Patchy light rain", False),
            ("Moderate or heavy snow showers", False),
            ("Thundery outbreaks possible", False),
            ("Light Drizzle", False),
            ("THUNDERSTORM", False),
        ],
    )
    def test_condition_keywords(self, condition_text: str, passed: bool):
        result = check_condition(make_sample(BASE_TIME, condition_text=condition_text), DEFAULT_PROFILE)
        assert result.passed is passed

    def test_reason_strings(self):
        assert REASONS[RuleType.TEMPERATURE] == "temperature out of range"
        assert REASONS[RuleType.WIND] == "wind too high"
        assert REASONS[RuleType.CONDITION] == "adverse precipitation/condition"

    def test_default_profile_rules(self):
        assert rules_for_profile(DEFAULT_PROFILE) == [check_temperature, check_wind, check_condition]

    def test_precipitation_rules_opt_in(self):
        profile = ActivityProfile(
            max_precipitation_probability_pct=50, max_precipitation_amount_in=0.1
        )
        assert len(rules_for_profile(profile)) == 5


class TestEvaluateSample:
    """Tests for evaluate_sample."""

    def test_all_failures_reported_in_order(self):
        sample = make_sample(
            BASE_TIME, temperature_f=35, wind_speed_mph=30, condition_text="Heavy rain"
        )
        result = evaluate_sample(sample)
        assert result.passed is False
        assert result.reasons == (
            "temperature out of range",
            "wind too high",
            "adverse precipitation/condition",
        )

    def test_mild_sample_passes(self):
        result = evaluate_sample(make_sample(BASE_TIME))
        assert result.passed is True
        assert result.reasons == ()
        assert len(result.results) == 3

    def test_high_precipitation_ignored_by_default(self):
        sample = make_sample(
            BASE_TIME,
            condition_text="Overcast",
            precipitation_probability_pct=90,
            precipitation_amount_in=0.5,
        )
        assert evaluate_sample(sample).passed is True

    def test_precipitation_probability_limit(self):
        profile = ActivityProfile(name="picnic", max_precipitation_probability_pct=40)
        sample = make_sample(BASE_TIME, condition_text="Overcast", precipitation_probability_pct=60)
        result = evaluate_sample(sample, profile)
        assert result.reasons == ("precipitation likely",)

    def test_precipitation_amount_limit(self):
        profile = ActivityProfile(name="picnic", max_precipitation_amount_in=0.05)
        sample = make_sample(BASE_TIME, condition_text="Overcast", precipitation_amount_in=0.2)
        result = evaluate_sample(sample, profile)
        assert result.reasons == ("precipitation amount too high",)


class TestActiveAlerts:
    """Tests for the alert overlay filter."""

    def test_filters_and_dedupes(self):
        current = make_alert(BASE_TIME - timedelta(hours=1), BASE_TIME + timedelta(hours=1))
        expired = make_alert(BASE_TIME - timedelta(hours=5), BASE_TIME - timedelta(hours=3))
        future = make_alert(BASE_TIME + timedelta(hours=3), BASE_TIME + timedelta(hours=5))

        result = active_alerts([current, expired, future, current], BASE_TIME)
        assert result == (current,)


class TestSuitabilityClassifier:
    """Tests for SuitabilityClassifier."""

    def test_suitable_verdict(self):
        sample = make_sample(BASE_TIME + timedelta(hours=2))
        verdict = SuitabilityClassifier().classify(sample, [], BASE_TIME, event_id="evt-1")

        assert verdict.suitable is True
        assert verdict.reasons == ()
        assert verdict.event_id == "evt-1"
        assert verdict.event_time == BASE_TIME
        assert verdict.matched_sample == sample
        assert verdict.time_delta_minutes == 120
        assert verdict.activity == "outdoor"

    def test_wind_too_high(self):
        """Closest sample has 30 mph wind."""
        event_time = BASE_TIME.replace(hour=20)
        sample = make_sample(BASE_TIME.replace(hour=19), wind_speed_mph=30)
        verdict = SuitabilityClassifier().classify(sample, [], event_time)

        assert verdict.suitable is False
        assert verdict.reasons == ("wind too high",)
        assert verdict.time_delta_minutes == -60

    def test_explicit_time_delta_kept(self):
        sample = make_sample(BASE_TIME)
        verdict = SuitabilityClassifier().classify(sample, [], BASE_TIME, time_delta_minutes=7)
        assert verdict.time_delta_minutes == 7

    @pytest.mark.parametrize("severity", list(AlertSeverity))
    def test_alerts_never_make_suitable_unsuitable(self, severity: AlertSeverity):
        alert = make_alert(BASE_TIME, BASE_TIME + timedelta(hours=2), severity=severity)
        verdict = SuitabilityClassifier().classify(make_sample(BASE_TIME), [alert], BASE_TIME)

        assert verdict.suitable is True
        assert verdict.reasons == ()
        assert verdict.active_alerts == (alert,)

    def test_alerts_never_make_unsuitable_suitable(self):
        sample = make_sample(BASE_TIME, temperature_f=100)
        alert = make_alert(BASE_TIME, BASE_TIME + timedelta(hours=2), severity=AlertSeverity.MINOR)
        with_alert = SuitabilityClassifier().classify(sample, [alert], BASE_TIME)
        without_alert = SuitabilityClassifier().classify(sample, [], BASE_TIME)

        assert with_alert.suitable is without_alert.suitable is False
        assert with_alert.reasons == without_alert.reasons

    def test_inactive_alert_not_attached(self):
        alert = make_alert(BASE_TIME + timedelta(hours=3), BASE_TIME + timedelta(hours=5))
        verdict = SuitabilityClassifier().classify(make_sample(BASE_TIME), [alert], BASE_TIME)
        assert verdict.active_alerts == ()
        assert verdict.has_severe_alert is False

    def test_profile_override(self):
        cycling = ActivityProfile(name="cycling", max_wind_mph=15)
        sample = make_sample(BASE_TIME, wind_speed_mph=20)
        classifier = SuitabilityClassifier()

        assert classifier.classify(sample, [], BASE_TIME).suitable is True
        verdict = classifier.classify(sample, [], BASE_TIME, cycling)
        assert verdict.suitable is False
        assert verdict.activity == "cycling"

    def test_temperature_monotonic(self):
        """Moving temperature away from the range never makes a verdict suitable."""
        classifier = SuitabilityClassifier()
        cold = [classifier.classify(make_sample(BASE_TIME, temperature_f=t), [], BASE_TIME)
                for t in (39.9, 30.0, 0.0, -20.0)]
        hot = [classifier.classify(make_sample(BASE_TIME, temperature_f=t), [], BASE_TIME)
               for t in (90.1, 95.0, 110.0)]
        assert not any(v.suitable for v in cold + hot)
