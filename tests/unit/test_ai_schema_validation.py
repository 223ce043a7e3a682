"""
Unit tests for AI schema validation and conversational retry logic.

Tests the Pydantic schema models and _call_with_schema_retry() helper
directly, using mocked Claude API responses.
"""

import pytest
from unittest.mock import MagicMock, patch
from pydantic import ValidationError

from ibd_nexus.services.ai_schemas import (
    IngredientScanSchema,
    JournalSummarySchema,
    MenuScanSchema,
    StoolImageAnalysisSchema,
    TrendAnalysisSchema,
)
from ibd_nexus.services.ai_service import (
    _strip_markdown_json,
    _fix_trailing_commas,
    split_data_url,
)


# =============================================================================
# Schema Validation Tests
# =============================================================================


class TestJournalSummarySchema:
    def test_valid_summary(self):
        data = {
            "mental_wellness_score": 6,
            "physical_symptoms": ["bloating"],
            "moods": ["tired"],
            "food_eaten": ["toast"],
            "exercise": [],
            "flare_up_risk": 40,
            "stool_type": "Soft",
            "stool_color": "Brown",
            "blood_in_stool": False,
            "cramps_severity": 2,
        }
        result = JournalSummarySchema.model_validate(data)
        assert result.stool_type == "Soft"
        assert result.food_eaten == ["toast"]

    def test_minimal_uses_defaults(self):
        result = JournalSummarySchema.model_validate(
            {"mental_wellness_score": 5, "flare_up_risk": 0}
        )
        assert result.moods == []
        assert result.stool_type == "Not mentioned"
        assert result.blood_in_stool is False
        assert result.cramps_severity == 0

    def test_wellness_out_of_range(self):
        with pytest.raises(ValidationError):
            JournalSummarySchema.model_validate(
                {"mental_wellness_score": 11, "flare_up_risk": 10}
            )

    def test_risk_out_of_range(self):
        with pytest.raises(ValidationError):
            JournalSummarySchema.model_validate(
                {"mental_wellness_score": 5, "flare_up_risk": 150}
            )

    def test_unknown_stool_type(self):
        with pytest.raises(ValidationError):
            JournalSummarySchema.model_validate(
                {"mental_wellness_score": 5, "flare_up_risk": 10, "stool_type": "Watery"}
            )


class TestStoolImageAnalysisSchema:
    def test_valid(self):
        result = StoolImageAnalysisSchema.model_validate(
            {
                "red_detections": [{"x": 0.1, "y": 0.2, "width": 0.3, "height": 0.1}],
                "brown_detections": [],
            }
        )
        assert len(result.red_detections) == 1

    def test_box_outside_unit_square(self):
        with pytest.raises(ValidationError):
            StoolImageAnalysisSchema.model_validate(
                {"red_detections": [{"x": 1.5, "y": 0.2, "width": 0.3, "height": 0.1}]}
            )


class TestTrendAnalysisSchema:
    def test_valid(self):
        result = TrendAnalysisSchema.model_validate(
            {
                "risk_trend": {"metric": "FlareUpRisk", "change_percent": -20, "start_value": 50, "end_value": 40},
                "wellness_trend": {"metric": "MentalWellnessScore", "change_percent": 10, "start_value": 5, "end_value": 5.5},
                "correlation_insights": {"high_risk_food_trigger": "coffee", "high_risk_mood_trigger": "stressed"},
                "stool_pattern": {"most_frequent_type": "Normal", "blood_in_stool_count": 1},
                "overall_interpretation": "Things appear to be improving.",
            }
        )
        assert result.risk_trend.timeframe == "Last 30 Days"
        assert result.correlation_insights.high_risk_food_trigger == "coffee"

    def test_missing_trend_metric(self):
        with pytest.raises(ValidationError):
            TrendAnalysisSchema.model_validate(
                {"risk_trend": {"metric": "FlareUpRisk"}}
            )

    def test_fallback_is_zeroed(self):
        result = TrendAnalysisSchema.fallback()
        assert result.risk_trend.change_percent == 0
        assert result.wellness_trend.start_value == 0
        assert result.wellness_trend.timeframe == "Last 30 Days"
        assert result.correlation_insights.high_risk_food_trigger == "N/A"
        assert result.correlation_insights.high_risk_mood_trigger == "N/A"
        assert result.stool_pattern.most_frequent_type == "N/A"
        assert result.stool_pattern.blood_in_stool_count == 0


class TestScanSchemas:
    def test_menu_item(self):
        result = MenuScanSchema.model_validate(
            {
                "items": [
                    {
                        "item_name": "Spicy wings",
                        "risk": "avoid",
                        "reason": "Spicy and fried.",
                        "bounding_box": {"x": 0.1, "y": 0.1, "width": 0.5, "height": 0.05},
                    }
                ]
            }
        )
        assert result.items[0].suggestion is None
        assert result.error is None

    def test_menu_invalid_risk(self):
        with pytest.raises(ValidationError):
            MenuScanSchema.model_validate(
                {
                    "items": [
                        {
                            "item_name": "Soup",
                            "risk": "red",
                            "reason": "n/a",
                            "bounding_box": {"x": 0, "y": 0, "width": 0.1, "height": 0.1},
                        }
                    ]
                }
            )

    def test_unreadable_flag(self):
        result = MenuScanSchema.model_validate({"items": [], "error": "UNREADABLE_IMAGE"})
        assert result.error == "UNREADABLE_IMAGE"

    def test_ingredient_risk_levels(self):
        result = IngredientScanSchema.model_validate(
            {
                "ingredients": [
                    {"ingredient_name": "inulin", "risk": "red", "reason": "High FODMAP."},
                    {"ingredient_name": "salt", "risk": "green", "reason": "Fine."},
                ]
            }
        )
        assert [i.risk for i in result.ingredients] == ["red", "green"]

    def test_ingredient_invalid_risk(self):
        with pytest.raises(ValidationError):
            IngredientScanSchema.model_validate(
                {"ingredients": [{"ingredient_name": "salt", "risk": "avoid", "reason": "x"}]}
            )


# =============================================================================
# Helper Function Tests
# =============================================================================


class TestStripMarkdownJson:
    def test_json_block(self):
        text = '```json\n{"a": 1}\n```'
        assert _strip_markdown_json(text) == '{"a": 1}'

    def test_plain_block(self):
        text = '```\n{"a": 1}\n```'
        assert _strip_markdown_json(text) == '{"a": 1}'

    def test_no_block(self):
        assert _strip_markdown_json('{"a": 1}') == '{"a": 1}'


class TestFixTrailingCommas:
    def test_object(self):
        assert _fix_trailing_commas('{"a": 1,}') == '{"a": 1}'

    def test_array(self):
        assert _fix_trailing_commas("[1, 2, ]") == "[1, 2]"


class TestSplitDataUrl:
    def test_valid(self):
        media_type, data = split_data_url("data:image/png;base64,iVBORw0KGgo=")
        assert media_type == "image/png"
        assert data == "iVBORw0KGgo="

    @pytest.mark.parametrize(
        "value",
        ["", "iVBORw0KGgo=", "data:text/plain;base64,abc", "data:image/png,abc"],
    )
    def test_invalid(self, value):
        with pytest.raises(ValueError, match="Invalid base64 image format"):
            split_data_url(value)


# =============================================================================
# Conversational Retry Tests
# =============================================================================


def _make_mock_response(text):
    """Create a mock Anthropic response with a single text block."""
    mock_block = MagicMock()
    mock_block.text = text

    mock_response = MagicMock()
    mock_response.content = [mock_block]
    mock_response.usage = MagicMock()

    return mock_response


def _make_empty_response():
    """Create a mock Anthropic response with no text blocks."""
    mock_block = MagicMock(spec=[])  # no text attribute

    mock_response = MagicMock()
    mock_response.content = [mock_block]
    mock_response.usage = MagicMock()

    return mock_response


VALID_SUMMARY = '"mental_wellness_score": 7, "flare_up_risk": 20, "food_eaten": ["rice"]}'


class TestCallWithSchemaRetry:
    """Tests for JournalAIService._call_with_schema_retry()."""

    def _make_service(self, mock_create):
        """Create a JournalAIService with a mocked client."""
        with patch("ibd_nexus.services.ai_service.Anthropic") as MockAnthropic:
            mock_client = MagicMock()
            mock_client.messages.create = mock_create
            MockAnthropic.return_value = mock_client

            from ibd_nexus.services.ai_service import JournalAIService

            return JournalAIService()

    def test_first_attempt_succeeds(self):
        """Valid response on first try - no retries needed."""
        mock_create = MagicMock(return_value=_make_mock_response(VALID_SUMMARY))
        service = self._make_service(mock_create)

        messages = [{"role": "user", "content": "Summarize."}]
        validated, raw_text = service._call_with_schema_retry(
            messages=messages,
            schema_class=JournalSummarySchema,
            request_params={"model": "test", "max_tokens": 100},
        )

        assert validated["mental_wellness_score"] == 7
        assert validated["food_eaten"] == ["rice"]
        assert raw_text == VALID_SUMMARY
        assert mock_create.call_count == 1
        # Messages should NOT be mutated on success
        assert len(messages) == 1

    def test_prefill_sent_as_assistant_turn(self):
        mock_create = MagicMock(return_value=_make_mock_response(VALID_SUMMARY))
        service = self._make_service(mock_create)

        service._call_with_schema_retry(
            messages=[{"role": "user", "content": "Summarize."}],
            schema_class=JournalSummarySchema,
            request_params={"model": "test", "max_tokens": 100},
        )

        sent = mock_create.call_args.kwargs["messages"]
        assert sent[-1] == {"role": "assistant", "content": "{"}

    def test_markdown_and_trailing_commas_tolerated(self):
        text = '```json\n{"mental_wellness_score": 7, "flare_up_risk": 20,}\n```'
        mock_create = MagicMock(return_value=_make_mock_response(text))
        service = self._make_service(mock_create)

        validated, _ = service._call_with_schema_retry(
            messages=[{"role": "user", "content": "Summarize."}],
            schema_class=JournalSummarySchema,
            request_params={"model": "test", "max_tokens": 100},
            prefill=None,
        )

        assert validated["flare_up_risk"] == 20

    def test_retry_on_bad_json_then_succeeds(self):
        """First attempt returns invalid JSON, second succeeds."""
        mock_create = MagicMock(
            side_effect=[_make_mock_response("not json at all"), _make_mock_response(VALID_SUMMARY)]
        )
        service = self._make_service(mock_create)

        messages = [{"role": "user", "content": "Summarize."}]
        validated, _ = service._call_with_schema_retry(
            messages=messages,
            schema_class=JournalSummarySchema,
            request_params={"model": "test", "max_tokens": 100},
        )

        assert validated["mental_wellness_score"] == 7
        assert mock_create.call_count == 2
        # Original + failed attempt + error feedback
        assert len(messages) == 3
        assert messages[1]["role"] == "assistant"
        assert "schema error" in messages[2]["content"]

    def test_retry_on_schema_error_then_succeeds(self):
        """Valid JSON but out-of-range value, then correct on retry."""
        bad = '"mental_wellness_score": 0, "flare_up_risk": 20}'
        mock_create = MagicMock(
            side_effect=[_make_mock_response(bad), _make_mock_response(VALID_SUMMARY)]
        )
        service = self._make_service(mock_create)

        validated, _ = service._call_with_schema_retry(
            messages=[{"role": "user", "content": "Summarize."}],
            schema_class=JournalSummarySchema,
            request_params={"model": "test", "max_tokens": 100},
        )

        assert validated["mental_wellness_score"] == 7
        assert mock_create.call_count == 2

    def test_all_attempts_fail(self):
        """Three bad responses raise ValueError."""
        mock_create = MagicMock(return_value=_make_mock_response("nope"))
        service = self._make_service(mock_create)

        with pytest.raises(ValueError, match="failed schema validation after 3 attempts"):
            service._call_with_schema_retry(
                messages=[{"role": "user", "content": "Summarize."}],
                schema_class=JournalSummarySchema,
                request_params={"model": "test", "max_tokens": 100},
            )

        assert mock_create.call_count == 3

    def test_empty_response_retried(self):
        mock_create = MagicMock(
            side_effect=[_make_empty_response(), _make_mock_response(VALID_SUMMARY)]
        )
        service = self._make_service(mock_create)

        messages = [{"role": "user", "content": "Summarize."}]
        validated, _ = service._call_with_schema_retry(
            messages=messages,
            schema_class=JournalSummarySchema,
            request_params={"model": "test", "max_tokens": 100},
        )

        assert validated["flare_up_risk"] == 20
        assert messages[1]["content"] == "(empty response)"

    def test_empty_response_every_time(self):
        mock_create = MagicMock(return_value=_make_empty_response())
        service = self._make_service(mock_create)

        with pytest.raises(ValueError, match="No text content"):
            service._call_with_schema_retry(
                messages=[{"role": "user", "content": "Summarize."}],
                schema_class=JournalSummarySchema,
                request_params={"model": "test", "max_tokens": 100},
            )
