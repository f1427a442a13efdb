"""Tests for forecast sample matching."""

from datetime import datetime, timedelta, timezone

import pytest

from outdoor_advisory.exceptions import AdvisoryError, NoForecastInWindowError
from outdoor_advisory.forecasts.matching import WindowMatcher, time_delta_minutes

from conftest import BASE_TIME, make_sample


def at(hour: int, minute: int = 0) -> datetime:
    return BASE_TIME.replace(hour=hour, minute=minute)


class TestTimeDelta:
    """Tests for the signed minute offset."""

    def test_positive_and_negative(self):
        assert time_delta_minutes(at(16), at(14)) == 120
        assert time_delta_minutes(at(12), at(14)) == -120

    def test_truncates_toward_zero(self):
        assert time_delta_minutes(at(14) + timedelta(seconds=90), at(14)) == 1
        assert time_delta_minutes(at(14) - timedelta(seconds=90), at(14)) == -1
        assert time_delta_minutes(at(14) - timedelta(seconds=30), at(14)) == 0


class TestWindowMatcher:
    """Tests for WindowMatcher."""

    def test_picks_closest_sample(self):
        samples = [make_sample(at(h)) for h in (10, 13, 17)]
        match = WindowMatcher().select(at(14), samples)
        assert match.sample.sample_time == at(13)
        assert match.time_delta_minutes == -60

    def test_exact_match(self):
        samples = [make_sample(at(h)) for h in (13, 14, 15)]
        match = WindowMatcher().select(at(14), samples)
        assert match.sample.sample_time == at(14)
        assert match.time_delta_minutes == 0

    def test_tie_prefers_later_sample(self):
        """12:00 and 16:00 are both 2h from a 14:00 event."""
        samples = [
            make_sample(at(12), temperature_f=68, wind_speed_mph=5, condition_text="Sunny"),
            make_sample(
                at(16), temperature_f=70, wind_speed_mph=6, condition_text="Partly cloudy"
            ),
        ]
        match = WindowMatcher(timedelta(hours=8)).select(at(14), samples)
        assert match.sample.sample_time == at(16)
        assert match.time_delta_minutes == 120

    def test_tie_order_independent(self):
        earlier = make_sample(at(13, 30))
        later = make_sample(at(14, 30))
        match = WindowMatcher().select(at(14), [earlier, later])
        assert match.sample == later

    def test_window_is_inclusive(self):
        samples = [make_sample(at(4))]
        match = WindowMatcher(timedelta(hours=8)).select(at(12), samples)
        assert match.sample.sample_time == at(4)
        assert match.time_delta_minutes == -480

    def test_no_sample_in_window(self):
        """Samples exist but none within 8h of the event."""
        samples = [make_sample(at(h)) for h in (0, 1, 2)]
        with pytest.raises(NoForecastInWindowError) as exc_info:
            WindowMatcher(timedelta(hours=8)).select(at(22), samples)

        assert isinstance(exc_info.value, AdvisoryError)
        assert exc_info.value.window == timedelta(hours=8)
        assert "8h" in str(exc_info.value)

    def test_no_samples(self):
        with pytest.raises(NoForecastInWindowError):
            WindowMatcher().select(at(14), [])

    def test_zero_window_requires_exact_match(self):
        matcher = WindowMatcher(timedelta(0))
        assert matcher.select(at(14), [make_sample(at(14))]).time_delta_minutes == 0
        with pytest.raises(NoForecastInWindowError):
            matcher.select(at(14), [make_sample(at(14, 1))])

    def test_event_in_other_time_zone(self):
        eastern = timezone(timedelta(hours=-4))
        samples = [make_sample(at(h)) for h in (12, 13, 14)]
        event_time = datetime(2025, 10, 13, 9, 0, tzinfo=eastern)  # 13:00 UTC
        match = WindowMatcher().select(event_time, samples)
        assert match.sample.sample_time == at(13)

    def test_naive_event_time_rejected(self):
        with pytest.raises(ValueError, match="timezone-aware"):
            WindowMatcher().select(datetime(2025, 10, 13, 14, 0), [make_sample(at(14))])

    def test_negative_window_rejected(self):
        with pytest.raises(ValueError):
            WindowMatcher(timedelta(hours=-1))

    def test_candidates(self):
        samples = [make_sample(at(h)) for h in range(24)]
        candidates = WindowMatcher(timedelta(hours=2)).candidates(at(12), samples)
        assert [s.sample_time for s in candidates] == [at(h) for h in range(10, 15)]
