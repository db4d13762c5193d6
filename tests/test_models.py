"""Tests for stock tracker models."""

import json
from datetime import timedelta

import pytest
from pydantic import ValidationError

from stock_tracker.data.models import PricePoint, TrackedStock, UserProfile
from tests.fakes import T0, make_stock


class TestTrackedStock:
    """Tests for TrackedStock."""

    def test_current_price_is_last_history_point(self):
        """Should report the most recent price."""
        stock = make_stock("ABC", 10.0, 11.0, 12.5)
        assert stock.current_price == 12.5

    def test_current_price_absent_without_history(self):
        """Should have no current price when history is empty."""
        assert TrackedStock(symbol="ABC").current_price is None

    def test_identity_is_symbol(self):
        """Two stocks with the same symbol are the same stock."""
        assert make_stock("ABC", 10.0) == make_stock("ABC", 99.0, 100.0)
        assert make_stock("ABC", 10.0) != make_stock("ABD", 10.0)
        assert make_stock("ABC").id == "ABC"
        assert len({make_stock("ABC", 1.0), make_stock("ABC", 2.0)}) == 1

    def test_rejects_empty_symbol(self):
        """Symbols must not be empty."""
        with pytest.raises(ValidationError):
            TrackedStock(symbol="")

    def test_allows_zero_and_negative_amounts(self):
        """Prices are not validated."""
        stock = make_stock("ABC", 0.0, -3.25)
        assert [p.amount for p in stock.history] == [0.0, -3.25]

    def test_is_immutable(self):
        """Stocks cannot be changed after creation."""
        stock = make_stock("ABC", 10.0)
        with pytest.raises(ValidationError):
            stock.symbol = "XYZ"


class TestUserProfile:
    """Tests for UserProfile."""

    def test_default_profile(self):
        """First-run profile tracks nothing and was never updated."""
        profile = UserProfile.default(name="Tester")
        assert profile.name == "Tester"
        assert profile.id is None
        assert profile.stocks == []
        assert profile.last_update is None

    def test_rejects_duplicate_symbols(self):
        """A user cannot track the same symbol twice."""
        with pytest.raises(ValidationError, match="Duplicate stock symbol: ABC"):
            UserProfile(name="Tester", stocks=[make_stock("ABC", 1.0), make_stock("ABC", 2.0)])

    def test_with_stocks_replaces_list_and_stamps_update(self, cached_profile):
        """Stocks are fully replaced, not merged."""
        updated_at = T0 + timedelta(hours=1)
        updated = cached_profile.with_stocks([make_stock("ABC", 10.5)], updated_at)

        assert [s.symbol for s in updated.stocks] == ["ABC"]
        assert updated.last_update == updated_at
        assert updated.id == cached_profile.id
        assert updated.name == cached_profile.name
        # Original untouched
        assert [s.symbol for s in cached_profile.stocks] == ["XYZ"]

    def test_with_stocks_validates_symbols(self, cached_profile):
        """Replacing with duplicate symbols is rejected."""
        with pytest.raises(ValidationError):
            cached_profile.with_stocks([make_stock("A"), make_stock("A")], T0)

    def test_json_uses_persisted_field_names(self, cached_profile):
        """Serialized keys stay stable across versions."""
        record = json.loads(cached_profile.to_json())

        assert set(record) == {"id", "name", "stocks", "lastUpdate"}
        stock = record["stocks"][0]
        assert set(stock) == {"symbol", "history"}
        assert set(stock["history"][0]) == {"time", "dollars"}
        assert stock["history"][1]["dollars"] == 43.5

    def test_json_round_trip(self, cached_profile):
        """Decoding the encoded profile gives back the same data."""
        decoded = UserProfile.from_json(cached_profile.to_json())
        assert decoded.model_dump() == cached_profile.model_dump()

    def test_from_json_accepts_missing_optional_fields(self):
        """A record without stocks or lastUpdate decodes with defaults."""
        profile = UserProfile.from_json('{"name": "Tester"}')
        assert profile.stocks == []
        assert profile.last_update is None

    def test_from_json_rejects_malformed_record(self):
        """Malformed records raise a validation error."""
        with pytest.raises(ValidationError):
            UserProfile.from_json('{"stocks": "not a list"}')


class TestPricePoint:
    """Tests for PricePoint."""

    def test_accepts_field_name_and_alias(self):
        """Can be built with either amount or dollars."""
        assert PricePoint(time=T0, amount=1.5) == PricePoint(time=T0, dollars=1.5)
