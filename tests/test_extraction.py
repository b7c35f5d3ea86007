"""Tests for the extraction module."""

import json

import pytest

from procurement_ai.errors import ExtractionError, RecordValidationError
from procurement_ai.extraction import extract_json, extract_record, strip_code_fence
from procurement_ai.models import ProposalDraft, ProposalScore, RFPDraft


class TestStripCodeFence:
    def test_removes_json_tagged_fence(self) -> None:
        assert strip_code_fence('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_removes_untagged_fence(self) -> None:
        assert strip_code_fence('```\n{"a": 1}\n```') == '{"a": 1}'

    def test_removes_uppercase_tag(self) -> None:
        assert strip_code_fence('```JSON\n{"a": 1}\n```') == '{"a": 1}'

    def test_tag_directly_followed_by_object(self) -> None:
        assert strip_code_fence('```json{"a": 1}```') == '{"a": 1}'

    def test_single_line_fence_without_tag(self) -> None:
        assert strip_code_fence('```{"a": 1}```') == '{"a": 1}'

    def test_surrounding_whitespace(self) -> None:
        assert strip_code_fence('\n\n  ```json\n{"a": 1}\n```  \n') == '{"a": 1}'

    def test_opening_fence_only(self) -> None:
        assert strip_code_fence('```json\n{"a": 1}') == '{"a": 1}'

    def test_closing_fence_only(self) -> None:
        assert strip_code_fence('{"a": 1}\n```') == '{"a": 1}'

    def test_unfenced_text_is_only_trimmed(self) -> None:
        assert strip_code_fence('  {"a": 1}\n') == '{"a": 1}'

    def test_idempotent(self) -> None:
        once = strip_code_fence('```json\n{"a": 1}\n```')
        assert strip_code_fence(once) == once

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("```null\n```", "null"),
            ("```42 \n```", "42"),
            ("```-3.5\n```", "-3.5"),
            ("```true```", "true"),
        ],
    )
    def test_bare_json_scalar_is_not_a_tag(self, text: str, expected: str) -> None:
        assert strip_code_fence(text) == expected

    def test_backticks_inside_value_kept(self) -> None:
        text = '{"note": "use ```code``` blocks"}'
        assert strip_code_fence(text) == text


class TestExtractJson:
    def test_scenario_fenced_rfp(self) -> None:
        text = '```json\n{"title":"Laptops","budget":50000}\n```'
        assert extract_json(text) == {"title": "Laptops", "budget": 50000}

    @pytest.mark.parametrize(
        ("text", "expected"),
        [("```null\n```", None), ("```42 \n```", 42), ("```json\nfalse\n```", False)],
    )
    def test_fenced_scalars(self, text: str, expected) -> None:
        assert extract_json(text) == expected

    def test_not_json_raises(self) -> None:
        with pytest.raises(ExtractionError):
            extract_json("not json at all")

    def test_chains_decode_error(self) -> None:
        with pytest.raises(ExtractionError) as exc_info:
            extract_json("{broken")
        assert isinstance(exc_info.value.__cause__, json.JSONDecodeError)

    def test_empty_text_raises(self) -> None:
        with pytest.raises(ExtractionError):
            extract_json("   ")

    def test_fence_with_prose_around_raises(self) -> None:
        with pytest.raises(ExtractionError):
            extract_json('Here you go:\n```json\n{"a": 1}\n```')

    def test_fenced_and_plain_parse_equal(self) -> None:
        plain = '{"content": "x", "pricing": {"total": 10}, "terms": "net 30"}'
        assert extract_json(plain) == extract_json(f"```json\n{plain}\n```")

    @pytest.mark.parametrize(
        "record",
        [
            {"title": "Chairs", "budget": None, "requirements": {"qty": 40}},
            {"score": 87.5, "summary": "Solid.", "evaluation": {"completeness": 90}},
            {"pricing": {"items": [{"sku": "A-1", "price": 12.5}]}, "terms": ""},
            {"unicode": "Lieferung in 30 Tagen, Preis 1.200 €"},
        ],
    )
    def test_round_trip_through_fence(self, record: dict) -> None:
        wrapped = f"```json\n{json.dumps(record, ensure_ascii=False)}\n```"
        assert extract_json(wrapped) == record


class TestExtractRecord:
    def test_rfp_draft(self) -> None:
        text = json.dumps(
            {
                "title": "Office laptops",
                "description": "20 laptops for the new office",
                "budget": 50000,
                "delivery_timeline": "30 days",
                "requirements": {"laptops": {"quantity": 20}},
            }
        )
        draft = extract_record(text, RFPDraft)
        assert draft.title == "Office laptops"
        assert draft.budget == 50000
        assert draft.requirements == {"laptops": {"quantity": 20}}

    def test_rfp_draft_nullable_fields(self) -> None:
        text = '{"title": "Desks", "description": "Standing desks", "budget": null}'
        draft = extract_record(text, RFPDraft)
        assert draft.budget is None
        assert draft.delivery_timeline is None
        assert draft.requirements == {}

    def test_numeric_string_budget_coerced(self) -> None:
        text = '{"title": "Desks", "description": "d", "budget": "12000"}'
        assert extract_record(text, RFPDraft).budget == 12000.0

    def test_missing_required_field_raises_validation_error(self) -> None:
        with pytest.raises(RecordValidationError) as exc_info:
            extract_record('{"description": "no title"}', RFPDraft)
        assert any(e["loc"] == ("title",) for e in exc_info.value.errors)

    def test_validation_error_is_extraction_error(self) -> None:
        with pytest.raises(ExtractionError):
            extract_record('{"content": 5, "pricing": "cheap"}', ProposalDraft)

    def test_non_object_json_rejected(self) -> None:
        with pytest.raises(RecordValidationError):
            extract_record('["a", "b"]', ProposalDraft)

    def test_score_in_range(self) -> None:
        score = extract_record(
            '```json\n{"score": 82, "summary": "Good", "evaluation": {"overall_fit": 85}}\n```',
            ProposalScore,
        )
        assert score.score == 82
        assert score.evaluation == {"overall_fit": 85}

    @pytest.mark.parametrize(
        "value", [-1, 100.5, 250, '"high"', "true", "false", '"85"']
    )
    def test_score_out_of_range_or_non_numeric_rejected(self, value) -> None:
        text = f'{{"score": {value}, "summary": "s", "evaluation": {{}}}}'
        with pytest.raises(RecordValidationError):
            extract_record(text, ProposalScore)

    def test_score_bounds_inclusive(self) -> None:
        assert extract_record('{"score": 0, "summary": "s"}', ProposalScore).score == 0
        assert extract_record('{"score": 100, "summary": "s"}', ProposalScore).score == 100

    def test_extra_fields_preserved(self) -> None:
        draft = extract_record(
            '{"content": "c", "pricing": {}, "terms": "t", "currency": "EUR"}',
            ProposalDraft,
        )
        assert draft.model_dump()["currency"] == "EUR"

    def test_invalid_json_raises_plain_extraction_error(self) -> None:
        with pytest.raises(ExtractionError) as exc_info:
            extract_record("Sorry, I cannot help with that.", ProposalScore)
        assert not isinstance(exc_info.value, RecordValidationError)
