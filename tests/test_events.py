"""
Unit tests for tournament event status and countdown.
"""
import pytest
import sys
import os
from datetime import date, datetime, timezone

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from knockout.events import get_event_status, get_countdown, parse_event_datetime


class TestParseEventDatetime:
    """Tests for parse_event_datetime."""

    def test_date_start_of_day(self):
        assert parse_event_datetime(date(2030, 4, 1)) == datetime(2030, 4, 1, 0, 0)

    def test_date_end_of_day(self):
        result = parse_event_datetime('2030-04-01', end_of_day=True)
        assert (result.hour, result.minute, result.second) == (23, 59, 59)

    def test_iso_datetime(self):
        assert parse_event_datetime('2030-04-01T09:30:00') == datetime(2030, 4, 1, 9, 30)

    def test_zulu_suffix(self):
        result = parse_event_datetime('2030-04-01T09:30:00Z')
        assert result == datetime(2030, 4, 1, 9, 30, tzinfo=timezone.utc)

    def test_timezone_localizes_naive(self):
        result = parse_event_datetime('2030-04-01T09:00:00', timezone='Asia/Ulaanbaatar')
        assert result.utcoffset().total_seconds() == 8 * 3600

    def test_invalid_value(self):
        with pytest.raises(ValueError):
            parse_event_datetime('')
        with pytest.raises(ValueError):
            parse_event_datetime(None)


class TestEventStatus:
    """Tests for the upcoming / ongoing / past state machine."""

    def test_upcoming(self):
        now = datetime(2030, 3, 31, 23, 0)
        assert get_event_status('2030-04-01', '2030-04-02', now=now) == 'upcoming'

    def test_ongoing_at_start(self):
        now = datetime(2030, 4, 1, 0, 0)
        assert get_event_status('2030-04-01', '2030-04-02', now=now) == 'ongoing'

    def test_ongoing_on_last_day(self):
        now = datetime(2030, 4, 2, 22, 0)
        assert get_event_status('2030-04-01', '2030-04-02', now=now) == 'ongoing'

    def test_past(self):
        now = datetime(2030, 4, 3, 0, 0)
        assert get_event_status('2030-04-01', '2030-04-02', now=now) == 'past'

    def test_single_day_without_end(self):
        now = datetime(2030, 4, 1, 18, 0)
        assert get_event_status('2030-04-01', None, now=now) == 'ongoing'

    def test_timezone_aware_now(self):
        # 2030-04-01 01:00 in Ulaanbaatar is still March 31 in UTC
        now = datetime(2030, 3, 31, 17, 0, tzinfo=timezone.utc)
        assert get_event_status('2030-04-01', '2030-04-01', now=now, timezone='Asia/Ulaanbaatar') == 'ongoing'
        assert get_event_status('2030-04-01', '2030-04-01', now=now) == 'upcoming'


class TestCountdown:
    """Tests for get_countdown."""

    def test_countdown_to_start(self):
        now = datetime(2030, 3, 30, 10, 29, 30)
        countdown = get_countdown('2030-04-01T12:00:00', '2030-04-01T18:00:00', now=now)
        assert countdown == {'status': 'upcoming', 'days': 2, 'hours': 1, 'minutes': 30, 'seconds': 30}

    def test_countdown_to_end(self):
        now = datetime(2030, 4, 1, 17, 0)
        countdown = get_countdown('2030-04-01T12:00:00', '2030-04-01T18:00:00', now=now)
        assert countdown['status'] == 'ongoing'
        assert (countdown['hours'], countdown['minutes']) == (1, 0)

    def test_countdown_past_is_zero(self):
        now = datetime(2030, 5, 1)
        countdown = get_countdown('2030-04-01', '2030-04-02', now=now)
        assert countdown == {'status': 'past', 'days': 0, 'hours': 0, 'minutes': 0, 'seconds': 0}
