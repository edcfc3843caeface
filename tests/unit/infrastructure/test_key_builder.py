"""Tests for DefaultKeyBuilder and hashing helpers."""

import pytest

from freshcache.infrastructure.key_builders.default import DefaultKeyBuilder
from freshcache.utils.hashing import hash_value, unique_tags


def fetch_readings(station_id: str, limit: int = 10) -> list[int]:
    return []


class TestDefaultKeyBuilder:
    """Tests for DefaultKeyBuilder."""

    @pytest.fixture
    def key_builder(self) -> DefaultKeyBuilder:
        """Create a key builder for testing."""
        return DefaultKeyBuilder(prefix="test")

    def test_build(self, key_builder: DefaultKeyBuilder) -> None:
        """Test entry keys combine prefix, namespace and resource hash."""
        assert key_builder.build("readings:A301", "abc123") == "test:abc123:readings:A301"

    def test_build_tag_key(self, key_builder: DefaultKeyBuilder) -> None:
        assert key_builder.build_tag_key("station:A301") == "test:tag:station:A301"

    def test_default_prefix(self) -> None:
        assert DefaultKeyBuilder().prefix == "freshcache"

    def test_call_key_without_arguments(self, key_builder: DefaultKeyBuilder) -> None:
        """Test a call without arguments is keyed by the function name alone."""
        key = key_builder.build_call_key(fetch_readings)

        assert key == f"{__name__}.fetch_readings"

    def test_call_key_with_arguments(self, key_builder: DefaultKeyBuilder) -> None:
        """Test arguments produce a stable digest."""
        key1 = key_builder.build_call_key(fetch_readings, ("A301",), {"limit": 5})
        key2 = key_builder.build_call_key(fetch_readings, ("A301",), {"limit": 5})
        key3 = key_builder.build_call_key(fetch_readings, ("B200",), {"limit": 5})

        assert key1 == key2
        assert key1 != key3
        assert key1.startswith(f"{__name__}.fetch_readings:a:")


class TestHashing:
    """Tests for hashing helpers."""

    def test_hash_value_is_order_independent(self) -> None:
        assert hash_value({"a": 1, "b": 2}) == hash_value({"b": 2, "a": 1})
        assert len(hash_value({"a": 1})) == 16

    def test_hash_value_none(self) -> None:
        assert hash_value(None) == "none"

    def test_unique_tags(self) -> None:
        assert unique_tags(["a", "b", "", "a", "c"]) == ["a", "b", "c"]
