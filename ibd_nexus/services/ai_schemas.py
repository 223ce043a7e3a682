"""
Pydantic models for validating structured JSON responses from Claude AI.

Each schema corresponds to one AI method's expected response format.
Used by _call_with_schema_retry() in ai_service.py for validation + retry.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field


UNREADABLE_IMAGE = "UNREADABLE_IMAGE"


# --- Entry Summary (summarize_entry) ---


class JournalSummarySchema(BaseModel):
    mental_wellness_score: int = Field(ge=1, le=10)
    physical_symptoms: list[str] = []
    moods: list[str] = []
    food_eaten: list[str] = []
    exercise: list[str] = []
    flare_up_risk: int = Field(ge=0, le=100)
    stool_type: Literal["Diarrhea", "Soft", "Normal", "Hard", "Not mentioned"] = "Not mentioned"
    stool_color: str = "Not mentioned"
    blood_in_stool: bool = False
    cramps_severity: int = Field(default=0, ge=0, le=10)


# --- Stool Photo (analyze_stool_image) ---


class BoundingBoxSchema(BaseModel):
    x: float = Field(ge=0, le=1)
    y: float = Field(ge=0, le=1)
    width: float = Field(ge=0, le=1)
    height: float = Field(ge=0, le=1)


class StoolImageAnalysisSchema(BaseModel):
    red_detections: list[BoundingBoxSchema] = []
    brown_detections: list[BoundingBoxSchema] = []


# --- Trend Analysis (generate_trend_analysis) ---


class TrendMetricSchema(BaseModel):
    metric: str
    change_percent: float = 0.0
    timeframe: str = "Last 30 Days"
    start_value: float = 0.0
    end_value: float = 0.0


class CorrelationInsightsSchema(BaseModel):
    high_risk_food_trigger: str = "N/A"
    high_risk_mood_trigger: str = "N/A"


class StoolPatternSchema(BaseModel):
    most_frequent_type: str = "N/A"
    blood_in_stool_count: int = Field(default=0, ge=0)


class TrendAnalysisSchema(BaseModel):
    risk_trend: TrendMetricSchema
    wellness_trend: TrendMetricSchema
    correlation_insights: CorrelationInsightsSchema = CorrelationInsightsSchema()
    stool_pattern: StoolPatternSchema = StoolPatternSchema()
    overall_interpretation: str = ""

    @classmethod
    def fallback(cls) -> "TrendAnalysisSchema":
        """Zeroed result returned when the model output cannot be used."""
        return cls(
            risk_trend=TrendMetricSchema(metric="FlareUpRisk"),
            wellness_trend=TrendMetricSchema(metric="MentalWellnessScore"),
        )


# --- Menu Scanner (scan_menu) ---


class MenuItemSchema(BaseModel):
    item_name: str
    risk: Literal["safe", "caution", "avoid"]
    reason: str
    suggestion: Optional[str] = None
    bounding_box: BoundingBoxSchema


class MenuScanSchema(BaseModel):
    items: list[MenuItemSchema] = []
    error: Optional[str] = None


# --- Ingredient Label Scanner (scan_ingredients) ---


class IngredientItemSchema(BaseModel):
    ingredient_name: str
    risk: Literal["green", "amber", "red"]
    reason: str


class IngredientScanSchema(BaseModel):
    ingredients: list[IngredientItemSchema] = []
    error: Optional[str] = None
