"""
Unit tests for field mapping: resolver, applier and stored mappings.

Run: pytest tests/unit/test_field_mapping_service.py -v
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from services.field_mapping_service import (
    FieldMappingService,
    TAXONOMY_FIELDS,
    apply_decisions,
    apply_stored_mappings,
    build_decision_request,
    canonical_field,
    canonical_record,
    resolve_fields,
    suggest_value,
)
from services.taxonomy_service import TaxonomyService
from models.field_mapping import (
    FieldMappingCreate,
    FieldMappingResponse,
    FieldMappingUpdate,
    MappingDecision,
    MappingTargetType,
)
from models.taxonomy import ConfigCategory, ConfigItemResponse, TaxonomySnapshot
from exceptions import (
    DatabaseError,
    FieldMappingExistsError,
    FieldMappingNotFoundError,
    MappingApplicationError,
    UnknownTaxonomyFieldError,
    ValidationError,
)

from tests.factories import ConfigItemFactory, FieldMappingFactory


def make_snapshot(**labels_by_category) -> TaxonomySnapshot:
    """TaxonomySnapshot from category → labels keyword arguments."""
    items = []
    for category, labels in labels_by_category.items():
        items.extend(
            ConfigItemResponse(**row)
            for row in ConfigItemFactory.create_category(category, labels)
        )
    return TaxonomySnapshot.from_items(items)


def decision(field_name, target_type, target_value=None) -> MappingDecision:
    return MappingDecision(field_name=field_name, target_type=target_type, target_value=target_value)


class TestCanonicalRecord:
    """Tests for canonical_field() and canonical_record()"""

    def test_camel_case_keys_become_snake_case(self):
        assert canonical_field("productArea") == "product_area"
        assert canonical_field("businessImpact") == "business_impact"
        assert canonical_field("team") == "team"

    def test_estimated_gtm_type_is_gtm_type(self):
        assert canonical_field("estimatedGtmType") == "gtm_type"
        assert canonical_field("estimated_gtm_type") == "gtm_type"

    def test_canonical_key_wins_over_alias(self):
        record = {"productArea": "Old", "product_area": "Core"}

        assert canonical_record(record) == {"product_area": "Core"}

    def test_does_not_mutate_input(self):
        record = {"productArea": "Core"}

        canonical_record(record)

        assert record == {"productArea": "Core"}


class TestResolveFields:
    """Tests for resolve_fields()"""

    def test_case_insensitive_match(self):
        """'on track' matches the 'On Track' status."""
        snapshot = make_snapshot(statuses=["On Track", "At Risk"])

        resolution = resolve_fields({"status": "on track"}, snapshot)

        status = next(v for v in resolution.verifications if v.field_name == "status")
        assert status.is_mapped is True
        assert status.matched_item.label == "On Track"

    def test_padding_is_ignored(self):
        snapshot = make_snapshot(teams=["Platform"])

        resolution = resolve_fields({"team": "  platform "}, snapshot)

        assert resolution.is_complete

    def test_unknown_value_is_unmapped(self):
        snapshot = make_snapshot(teams=["Platform"])

        resolution = resolve_fields({"team": "Ghost Team"}, snapshot)

        assert [v.field_name for v in resolution.unmapped] == ["team"]
        assert resolution.unmapped[0].is_mapped is False
        assert resolution.unmapped[0].matched_item is None
        assert resolution.unmapped[0].category == ConfigCategory.TEAMS

    def test_blank_and_absent_values_are_mapped(self):
        snapshot = make_snapshot()

        resolution = resolve_fields({"team": "", "status": "   ", "priority": None}, snapshot)

        assert resolution.is_complete
        assert all(v.matched_item is None for v in resolution.verifications)

    def test_verifications_follow_field_order(self):
        snapshot = make_snapshot()
        record = {"gtm_type": "A", "team": "B", "product_area": "C"}

        resolution = resolve_fields(record, snapshot)

        assert [v.field_name for v in resolution.verifications] == [f for f, _ in TAXONOMY_FIELDS]
        assert [v.field_name for v in resolution.unmapped] == ["product_area", "team", "gtm_type"]

    def test_inactive_items_do_not_match(self):
        items = [
            ConfigItemResponse(**ConfigItemFactory.create(category="teams", label="Legacy", is_active=False))
        ]
        snapshot = TaxonomySnapshot(items={ConfigCategory.TEAMS: items})

        resolution = resolve_fields({"team": "Legacy"}, snapshot)

        assert not resolution.is_complete

    def test_camel_case_record_keys(self):
        snapshot = make_snapshot(gtm_types=["Launch"], product_areas=["Core"])

        resolution = resolve_fields({"estimatedGtmType": "launch", "productArea": "core"}, snapshot)

        assert resolution.is_complete

    def test_resolution_is_deterministic(self):
        snapshot = make_snapshot(statuses=["On Track"], teams=["Platform"])
        record = {"status": "on track", "team": "Ghost Team", "priority": "P0"}

        first = resolve_fields(record, snapshot)
        second = resolve_fields(record, snapshot)

        assert first == second


class TestDecisionRequest:
    """Tests for build_decision_request() and suggest_value()"""

    def test_unmapped_field_lists_options(self):
        snapshot = make_snapshot(teams=["Platform Team", "Growth"])
        resolution = resolve_fields({"team": "platform"}, snapshot)

        request = build_decision_request(resolution, snapshot)

        assert len(request) == 1
        assert request[0].field_name == "team"
        assert request[0].raw_value == "platform"
        assert request[0].available_options == ["Platform Team", "Growth"]
        assert request[0].suggested_value == "Platform Team"

    def test_no_suggestion_without_overlap(self):
        assert suggest_value("Ghost Team", ["Platform", "Growth"]) is None

    def test_suggestion_when_label_inside_value(self):
        assert suggest_value("Growth squad", ["Platform", "Growth"]) == "Growth"


class TestApplyStoredMappings:
    """Tests for apply_stored_mappings()"""

    def _mapping(self, **kwargs) -> FieldMappingResponse:
        return FieldMappingResponse(**FieldMappingFactory.create(**kwargs))

    def test_rewrites_known_source_value(self):
        snapshot = make_snapshot(teams=["Platform"])
        mappings = [self._mapping(field_name="team", source_value="plat", target_value="Platform")]

        record = apply_stored_mappings({"team": "PLAT"}, mappings, snapshot)

        assert record["team"] == "Platform"

    def test_skip_mapping_removes_field(self):
        snapshot = make_snapshot()
        mappings = [self._mapping(field_name="priority", source_value="whatever", target_type="skip")]

        record = apply_stored_mappings({"priority": "whatever", "title": "X"}, mappings, snapshot)

        assert record == {"title": "X"}

    def test_valid_value_is_never_rewritten(self):
        snapshot = make_snapshot(teams=["Platform", "Growth"])
        mappings = [self._mapping(field_name="team", source_value="Platform", target_value="Growth")]

        record = apply_stored_mappings({"team": "Platform"}, mappings, snapshot)

        assert record["team"] == "Platform"

    def test_inactive_mapping_ignored(self):
        snapshot = make_snapshot()
        mappings = [self._mapping(field_name="team", source_value="x", target_value="Y", is_active=False)]

        record = apply_stored_mappings({"team": "x"}, mappings, snapshot)

        assert record["team"] == "x"

    def test_legacy_target_type_names(self):
        snapshot = make_snapshot()
        mappings = [self._mapping(field_name="team", source_value="x", target_value="Y", target_type="existing")]

        record = apply_stored_mappings({"team": "x"}, mappings, snapshot)

        assert mappings[0].target_type == MappingTargetType.USE_EXISTING
        assert record["team"] == "Y"


class TestApplyDecisions:
    """Tests for apply_decisions()"""

    def test_create_new_adds_item_and_rewrites_field(self, mock_db, mock_supabase):
        """create-new appends a teams item after the current max."""
        mock_supabase.set_table_data("config_items", [
            ConfigItemFactory.create(category="teams", label="Platform", sort_order=0),
            ConfigItemFactory.create(category="teams", label="Growth", sort_order=1),
        ])
        taxonomy = TaxonomyService()
        record = {"team": "ghost team", "title": "Launch"}

        result = apply_decisions(record, [decision("team", "create-new", "Ghost Team")], taxonomy)

        assert result.record == {"team": "Ghost Team", "title": "Launch"}
        assert len(result.created_items) == 1
        assert result.created_items[0].category == ConfigCategory.TEAMS
        assert result.created_items[0].sort_order == 2
        assert result.applied == ["team"]
        assert "Ghost Team" in [i.label for i in taxonomy.list_active("teams")]

    def test_skip_removes_field(self, mock_db):
        result = apply_decisions({"team": "X", "title": "T"}, [decision("team", "skip")], TaxonomyService())

        assert "team" not in result.record
        assert result.record["title"] == "T"

    def test_use_existing_sets_value(self, mock_db):
        result = apply_decisions(
            {"status": "on trak"},
            [decision("status", "use-existing", "On Track")],
            TaxonomyService()
        )

        assert result.record["status"] == "On Track"
        assert result.created_items == []

    def test_keep_as_is_leaves_value(self, mock_db):
        result = apply_decisions({"status": "Odd"}, [decision("status", "keep-as-is")], TaxonomyService())

        assert result.record["status"] == "Odd"
        assert result.applied == ["status"]

    def test_input_record_not_mutated(self, mock_db):
        record = {"team": "X"}

        apply_decisions(record, [decision("team", "skip")], TaxonomyService())

        assert record == {"team": "X"}

    def test_unknown_field_rejected_before_any_change(self, mock_db, mock_supabase):
        with pytest.raises(UnknownTaxonomyFieldError):
            apply_decisions(
                {"team": "X", "title": "T"},
                [decision("team", "create-new", "X"), decision("title", "skip")],
                TaxonomyService()
            )

        assert mock_supabase.get_table_data("config_items") == []

    def test_duplicate_create_new_in_batch_is_partial_failure(self, mock_db, mock_supabase):
        """Second create-new of the same label fails; the first stays applied."""
        taxonomy = TaxonomyService()
        record = {"team": "ghost", "product_area": "ghost"}
        decisions = [
            decision("team", "create-new", "Ghost Team"),
            decision("team", "create-new", "ghost team"),
        ]

        with pytest.raises(MappingApplicationError) as exc_info:
            apply_decisions(record, decisions, taxonomy)

        error = exc_info.value
        assert error.status_code == 422
        assert error.code == "MAPPING_PARTIALLY_APPLIED"
        assert error.details["failed_field"] == "team"
        assert error.details["cause_code"] == "CONFIG_ITEM_LABEL_EXISTS"
        assert error.partial.applied == ["team"]
        assert [i.label for i in error.partial.created_items] == ["Ghost Team"]
        assert error.partial.record["team"] == "Ghost Team"
        # No rollback
        assert len(taxonomy.list_active("teams")) == 1

    def test_create_new_of_existing_label_is_partial_failure(self, mock_db, mock_supabase):
        mock_supabase.set_table_data("config_items", [
            ConfigItemFactory.create(category="teams", label="Platform", sort_order=0),
        ])
        decisions = [
            decision("status", "skip"),
            decision("team", "create-new", "platform"),
        ]

        with pytest.raises(MappingApplicationError) as exc_info:
            apply_decisions({"status": "x", "team": "plat"}, decisions, TaxonomyService())

        assert exc_info.value.details["cause_code"] == "CONFIG_ITEM_LABEL_EXISTS"
        assert exc_info.value.partial.applied == ["status"]
        assert "status" not in exc_info.value.partial.record

    def test_legacy_decision_names(self, mock_db):
        result = apply_decisions({"team": "X"}, [decision("team", "keep")], TaxonomyService())

        assert result.record["team"] == "X"

    def test_value_required_for_create_new(self):
        with pytest.raises(ValueError):
            decision("team", "create-new")


class TestFieldMappingService:
    """Tests for FieldMappingService"""

    def test_create_and_get_all(self, mock_db, mock_supabase):
        service = FieldMappingService()

        created = service.create(FieldMappingCreate(
            field_name="productArea",
            source_value="core stuff",
            target_value="Core",
            target_type="use-existing"
        ))

        assert created.field_name == "product_area"
        assert [m.id for m in service.get_all("product_area")] == [created.id]

    def test_create_duplicate_pair_raises(self, mock_db, mock_supabase):
        mock_supabase.set_table_data("field_mappings", [
            FieldMappingFactory.create(field_name="team", source_value="plat", target_value="Platform"),
        ])
        service = FieldMappingService()

        with pytest.raises(FieldMappingExistsError) as exc_info:
            service.create(FieldMappingCreate(
                field_name="team", source_value="plat", target_value="Growth", target_type="use-existing"
            ))

        assert exc_info.value.status_code == 409

    def test_create_lookup_failure_is_database_error(self, mock_db, mock_supabase):
        mock_supabase.fail("field_mappings", "select")
        service = FieldMappingService()

        with pytest.raises(DatabaseError):
            service.create(FieldMappingCreate(
                field_name="team", source_value="plat", target_value="Platform", target_type="use-existing"
            ))

        assert mock_supabase.get_table_data("field_mappings") == []

    def test_update_rejects_null_target_type(self):
        with pytest.raises(PydanticValidationError, match="target_type cannot be null"):
            FieldMappingUpdate(target_type=None)

    def test_update_requires_value_for_use_existing(self, mock_db, mock_supabase):
        mock_supabase.set_table_data("field_mappings", [
            FieldMappingFactory.create(id="m-1", target_type="skip"),
        ])
        service = FieldMappingService()

        with pytest.raises(ValidationError):
            service.update("m-1", FieldMappingUpdate(target_type="use-existing"))

    def test_delete_unknown_raises(self, mock_db):
        with pytest.raises(FieldMappingNotFoundError):
            FieldMappingService().delete("missing")

    def test_remember_upserts_by_field_and_source(self, mock_db, mock_supabase):
        service = FieldMappingService()
        record = {"team": "ghost", "status": ""}

        service.remember(record, [decision("team", "use-existing", "Platform")])
        stored = service.remember(record, [decision("team", "use-existing", "Growth"), decision("status", "skip")])

        rows = mock_supabase.get_table_data("field_mappings")
        assert len(rows) == 1
        assert rows[0]["source_value"] == "ghost"
        assert rows[0]["target_value"] == "Growth"
        assert [m.target_value for m in stored] == ["Growth"]
