"""Tests for code allocation, record ids and sort keys."""

from holdings.models import CodeCounter
from holdings.services.code_allocator import (
    allocate_code,
    format_code,
    new_record_id,
    next_sort_key,
)


class TestAllocateCode:

    def test_codes_increase_from_counter_start(self, db):
        assert allocate_code(db) == "1001"
        assert allocate_code(db) == "1002"
        db.commit()
        assert allocate_code(db) == "1003"

    def test_rollback_discards_increment(self, db):
        assert allocate_code(db) == "1001"
        db.rollback()
        assert allocate_code(db) == "1001"

    def test_missing_counter_row_is_recreated(self, db):
        db.query(CodeCounter).delete()
        db.commit()
        assert allocate_code(db) == "1001"
        assert allocate_code(db) == "1002"


class TestFormatting:

    def test_zero_padded_to_four_digits(self):
        assert format_code(7) == "0007"
        assert format_code(1000) == "1000"

    def test_wider_values_grow(self):
        assert format_code(123456) == "123456"

    def test_record_id_prefix(self):
        record_id = new_record_id("co")
        assert record_id.startswith("co-")
        assert new_record_id("co") != record_id


class TestSortKey:

    def test_strictly_increasing(self):
        keys = [next_sort_key() for _ in range(200)]
        assert all(b > a for a, b in zip(keys, keys[1:]))
