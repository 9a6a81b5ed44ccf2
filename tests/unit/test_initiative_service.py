"""
Unit tests for InitiativeService.

Run: pytest tests/unit/test_initiative_service.py -v
"""

import pytest
from pydantic import ValidationError as PydanticValidationError
from datetime import date

from services.initiative_service import InitiativeService
from models.initiative import ExecutiveUpdateRequest, InitiativeCreate, InitiativeUpdate
from exceptions import (
    InitiativeNotFoundError,
    InvalidDateRangeError,
    ValidationError,
)

from tests.factories import InitiativeFactory


def initiative_payload(**overrides) -> dict:
    payload = {
        "title": "Self-serve onboarding",
        "description": "Cut time to first value",
        "product_area": "Core",
        "team": "Platform",
        "priority": "High",
        "status": "On Track",
        "start_date": "2024-01-01",
        "end_date": "2024-03-31",
        "owner_id": "user-1",
        "created_by_id": "user-1",
    }
    payload.update(overrides)
    return payload


class TestInitiativeServiceGetAll:
    """Tests for InitiativeService.get_all()"""

    def test_date_range_uses_inclusive_overlap(self, mock_db, mock_supabase):
        """[2023-12-15, 2024-01-05] overlaps January; February does not."""
        # Arrange
        mock_supabase.set_table_data("initiatives", [
            InitiativeFactory.create(id="dec", start_date="2023-12-15", end_date="2024-01-05"),
            InitiativeFactory.create(id="feb", start_date="2024-02-01", end_date="2024-02-28"),
            InitiativeFactory.create(id="edge", start_date="2024-01-31", end_date="2024-01-31"),
        ])
        service = InitiativeService()

        # Act
        initiatives = service.get_all(start_date=date(2024, 1, 1), end_date=date(2024, 1, 31))

        # Assert
        assert sorted(i.id for i in initiatives) == ["dec", "edge"]

    def test_reversed_date_range_raises(self, mock_db):
        service = InitiativeService()

        with pytest.raises(InvalidDateRangeError):
            service.get_all(start_date=date(2024, 2, 1), end_date=date(2024, 1, 1))

    def test_filters_combine(self, mock_db, mock_supabase):
        mock_supabase.set_table_data("initiatives", [
            InitiativeFactory.create(id="a", owner_id="u1", status="On Track", tier=1),
            InitiativeFactory.create(id="b", owner_id="u1", status="At Risk", tier=1),
            InitiativeFactory.create(id="c", owner_id="u2", status="On Track", tier=2),
        ])
        service = InitiativeService()

        assert [i.id for i in service.get_all(owner_id="u1", status="On Track")] == ["a"]
        assert [i.id for i in service.get_all(tier=2)] == ["c"]

    def test_filter_by_creator(self, mock_db, mock_supabase):
        mock_supabase.set_table_data("initiatives", [
            InitiativeFactory.create(id="a", created_by_id="u1"),
            InitiativeFactory.create(id="b", created_by_id="u2"),
        ])

        initiatives = InitiativeService().get_all(created_by_id="u2")

        assert [i.id for i in initiatives] == ["b"]


class TestInitiativeServiceStats:
    """Tests for InitiativeService.stats()"""

    def test_stats_counts_and_average(self, mock_db, mock_supabase):
        mock_supabase.set_table_data("initiatives", [
            InitiativeFactory.create(status="On Track", progress=50),
            InitiativeFactory.create(status="On Track", progress=25),
            InitiativeFactory.create(status="At Risk", progress=0),
        ])

        stats = InitiativeService().stats()

        assert stats.total == 3
        assert stats.by_status == {"On Track": 2, "At Risk": 1}
        assert stats.overall_progress == 25.0

    def test_stats_empty(self, mock_db):
        stats = InitiativeService().stats()

        assert stats.total == 0
        assert stats.overall_progress == 0.0


class TestInitiativeServiceExecutiveSummary:
    """Tests for executive_summary() and set_executive_update()"""

    def test_summary_counts_case_insensitively(self, mock_db, mock_supabase):
        mock_supabase.set_table_data("initiatives", [
            InitiativeFactory.create(id="a", status="complete", progress=100),
            InitiativeFactory.create(id="b", status="On Track", progress=50),
            InitiativeFactory.create(id="c", status="Off Track", progress=10),
            InitiativeFactory.create(id="d", status="AT RISK", progress=0, priority="critical"),
        ])

        summary = InitiativeService().executive_summary()

        assert summary.total == 4
        assert summary.completed == 1
        assert summary.in_progress == 1
        assert summary.at_risk == 2
        assert summary.average_progress == 40.0
        assert summary.completion_rate == 25.0
        assert [i.id for i in summary.critical] == ["d"]
        assert sorted(i.id for i in summary.needs_attention) == ["c", "d"]
        assert "2 initiatives require attention" in summary.overview

    def test_summary_empty(self, mock_db):
        summary = InitiativeService().executive_summary()

        assert summary.total == 0
        assert summary.completion_rate == 0.0
        assert summary.overview.endswith("All initiatives are on track.")

    def test_summary_lists_flagged_only(self, mock_db, mock_supabase):
        mock_supabase.set_table_data("initiatives", [
            InitiativeFactory.create(id="shown", show_on_executive_summary=True),
            InitiativeFactory.create(id="hidden"),
        ])

        summary = InitiativeService().executive_summary()

        assert [i.id for i in summary.flagged] == ["shown"]

    def test_set_executive_update_flags_and_keeps_other_fields(self, mock_db, mock_supabase):
        mock_supabase.set_table_data("initiatives", [
            InitiativeFactory.create(id="i-1", title="Original", reason_if_not_on_track="Old reason"),
        ])

        updated = InitiativeService().set_executive_update(
            "i-1", ExecutiveUpdateRequest(executive_update="Beta in customers' hands")
        )

        assert updated.executive_update == "Beta in customers' hands"
        assert updated.show_on_executive_summary is True
        assert updated.reason_if_not_on_track == "Old reason"
        assert updated.title == "Original"

    def test_set_executive_update_unknown_raises(self, mock_db):
        with pytest.raises(InitiativeNotFoundError):
            InitiativeService().set_executive_update("missing", ExecutiveUpdateRequest(executive_update="x"))

    def test_missing_tags_read_as_empty_list(self, mock_db, mock_supabase):
        mock_supabase.set_table_data("initiatives", [InitiativeFactory.create(id="i-1", tags=None)])

        assert InitiativeService().get_by_id("i-1").tags == []


class TestInitiativeServiceWrite:
    """Tests for create(), update() and delete()"""

    def test_create_stores_initiative(self, mock_db, mock_supabase):
        service = InitiativeService()

        initiative = service.create(InitiativeCreate(**initiative_payload()))

        assert initiative.id
        assert initiative.tier == 1
        assert initiative.progress == 0
        assert initiative.start_date == date(2024, 1, 1)
        assert len(mock_supabase.get_table_data("initiatives")) == 1

    def test_create_model_rejects_reversed_dates(self):
        with pytest.raises(ValueError):
            InitiativeCreate(**initiative_payload(start_date="2024-04-01", end_date="2024-03-01"))

    def test_create_model_rejects_out_of_range_tier(self):
        with pytest.raises(ValueError):
            InitiativeCreate(**initiative_payload(tier=4))

    def test_create_from_record_fills_owner(self, mock_db):
        record = initiative_payload()
        del record["owner_id"]
        del record["created_by_id"]

        initiative = InitiativeService().create_from_record(record, created_by_id="user-9")

        assert initiative.created_by_id == "user-9"
        assert initiative.owner_id == "user-9"

    def test_create_from_invalid_record_raises_validation_error(self, mock_db, mock_supabase):
        record = initiative_payload()
        del record["title"]

        with pytest.raises(ValidationError) as exc_info:
            InitiativeService().create_from_record(record)

        assert exc_info.value.code == "VALIDATION_ERROR"
        assert exc_info.value.details["errors"][0]["loc"] == ["title"]
        assert mock_supabase.get_table_data("initiatives") == []

    def test_update_merges_provided_fields(self, mock_db, mock_supabase):
        mock_supabase.set_table_data("initiatives", [
            InitiativeFactory.create(id="i-1", title="Original", progress=10),
        ])

        updated = InitiativeService().update("i-1", InitiativeUpdate(progress=60))

        assert updated.progress == 60
        assert updated.title == "Original"

    def test_update_checks_merged_dates(self, mock_db, mock_supabase):
        mock_supabase.set_table_data("initiatives", [
            InitiativeFactory.create(id="i-1", start_date="2024-01-01", end_date="2024-03-31"),
        ])

        with pytest.raises(InvalidDateRangeError):
            InitiativeService().update("i-1", InitiativeUpdate(start_date="2024-06-01"))

    def test_update_model_rejects_null_required_fields(self):
        with pytest.raises(PydanticValidationError, match="start_date, title cannot be null"):
            InitiativeUpdate(title=None, start_date=None)

    def test_update_model_allows_null_optional_fields(self):
        patch = InitiativeUpdate(goal=None, executive_update=None).model_dump(exclude_unset=True)

        assert patch == {"goal": None, "executive_update": None}

    def test_update_unknown_raises(self, mock_db):
        with pytest.raises(InitiativeNotFoundError):
            InitiativeService().update("missing", InitiativeUpdate(progress=5))

    def test_delete_removes_row(self, mock_db, mock_supabase):
        mock_supabase.set_table_data("initiatives", [InitiativeFactory.create(id="i-1")])

        InitiativeService().delete("i-1")

        assert mock_supabase.get_table_data("initiatives") == []

    def test_delete_unknown_raises(self, mock_db):
        with pytest.raises(InitiativeNotFoundError):
            InitiativeService().delete("missing")
