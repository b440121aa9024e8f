# workspace_rbac/test/unit/test_datetime_utils.py

# Para Rodar o Script:
# pytest workspace_rbac/test/unit/test_datetime_utils.py -v

from datetime import datetime, timedelta, timezone

from workspace_rbac.shared.utils.datetime_utils import DateTimeUtil


class TestDateTimeUtil:
    """Test suite for DateTimeUtil class."""

    def test_utcnow(self):
        dt = DateTimeUtil.utcnow()
        assert dt.tzinfo == timezone.utc

    def test_utcnow_naive(self):
        assert DateTimeUtil.utcnow_naive().tzinfo is None

    def test_for_storage_converts_aware_to_naive_utc(self):
        aware = datetime(2026, 3, 1, 9, 0, tzinfo=timezone(timedelta(hours=-3)))
        assert DateTimeUtil.for_storage(aware) == datetime(2026, 3, 1, 12, 0)

    def test_for_storage_keeps_naive(self):
        naive = datetime(2026, 3, 1, 12, 0)
        assert DateTimeUtil.for_storage(naive) == naive

    def test_is_past(self):
        now = datetime(2026, 3, 1, 12, 0)
        assert DateTimeUtil.is_past(now - timedelta(seconds=1), now)
        assert DateTimeUtil.is_past(now, now)
        assert not DateTimeUtil.is_past(now + timedelta(seconds=1), now)
