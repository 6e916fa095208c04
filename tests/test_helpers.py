"""
Helper Tests
============

Tests for row access over ORM objects and REST-style mappings.
"""

from decimal import Decimal

import pytest

from lifeos.models.task import Task, TaskStatus
from lifeos.utils.helpers import is_completed, is_pending, row_amount, row_get, row_status


class TestRowAccess:
    """Tests for row_get / row_status / row_amount"""

    def test_objects_and_mappings_read_alike(self):
        task = Task(title="Read", status=TaskStatus.COMPLETED)
        row = {"title": "Read", "status": "completed"}

        assert row_get(task, "title") == row_get(row, "title") == "Read"
        assert row_status(task) == row_status(row) == "completed"
        assert is_completed(task) and is_completed(row)
        assert not is_pending(row)
        assert row_get(row, "missing", "fallback") == "fallback"

    @pytest.mark.parametrize(
        "amount, expected",
        [(Decimal("12.50"), 12.5), ("3.25", 3.25), (7, 7.0), (None, 0.0), ("n/a", 0.0)],
    )
    def test_row_amount(self, amount, expected):
        assert row_amount({"amount": amount}) == expected
