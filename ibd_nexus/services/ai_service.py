"""
Claude AI integration service for journal summaries, photo analysis, trends and scanners.

This service provides five AI capabilities:
1. Voice journal summarization into structured health data
2. Stool photo analysis (red/brown region detection)
3. Trend analysis across journal summaries
4. Restaurant menu scanning against a dietary profile
5. Ingredient label scanning against a dietary profile

Summary and photo analysis never fail the journal workflow: they return a
neutral/empty result when the AI is unusable. Trends and scanners raise.
"""

import json
import re
import base64
import asyncio
import random
import logging
from pathlib import Path
from typing import Sequence
from functools import wraps

from anthropic import Anthropic
import anthropic
import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from ibd_nexus.config import settings
from ibd_nexus.models import DietaryProfile, ImageAnalysisResult, JournalSummary
from ibd_nexus.services.ai_schemas import (
    UNREADABLE_IMAGE,
    IngredientScanSchema,
    JournalSummarySchema,
    MenuScanSchema,
    StoolImageAnalysisSchema,
    TrendAnalysisSchema,
)
from ibd_nexus.services.prompts import (
    ENTRY_SUMMARY_SYSTEM_PROMPT,
    INGREDIENT_SCAN_SYSTEM_PROMPT,
    MENU_SCAN_SYSTEM_PROMPT,
    STOOL_IMAGE_SYSTEM_PROMPT,
    TREND_ANALYSIS_SYSTEM_PROMPT,
    build_profile_context,
)


logger = logging.getLogger(__name__)

DATA_URL_PATTERN = re.compile(r"^data:(image/[\w.+-]+);base64,(.+)$", re.DOTALL)


def _strip_markdown_json(text: str) -> str:
    """Strip markdown code block wrappers from JSON text."""
    if "```json" in text:
        text = text.split("```json")[1].split("```")[0].strip()
    elif "```" in text:
        text = text.split("```")[1].split("```")[0].strip()
    return text


def _fix_trailing_commas(text: str) -> str:
    """Fix trailing commas in JSON (common LLM error)."""
    text = re.sub(r",\s*}", "}", text)
    text = re.sub(r",\s*]", "]", text)
    return text


def split_data_url(data_url: str) -> tuple[str, str]:
    """
    Split a base64 image data URL into (media_type, base64_data).

    Raises:
        ValueError: If the value is not a base64 image data URL
    """
    match = DATA_URL_PATTERN.match(data_url or "")
    if not match:
        raise ValueError("Invalid base64 image format")
    return match.group(1), match.group(2)


def image_file_to_data_url(image_path: str) -> str:
    """Encode an image on disk as a base64 data URL."""
    return f"data:{_get_media_type(image_path)};base64,{_load_image_base64(image_path)}"


def _load_image_base64(image_path: str) -> str:
    """Load image file and encode as base64."""
    with open(image_path, "rb") as f:
        return base64.standard_b64encode(f.read()).decode("utf-8")


def _get_media_type(image_path: str) -> str:
    """Determine media type from file extension."""
    suffix = Path(image_path).suffix.lower()
    media_types = {
        ".jpg": "image/jpeg",
        ".jpeg": "image/jpeg",
        ".png": "image/png",
        ".gif": "image/gif",
        ".webp": "image/webp",
    }
    return media_types.get(suffix, "image/jpeg")


def retry_on_connection_error(max_attempts=3, base_delay=1.0):
    """
    Retry decorator for API calls that may fail due to transient network issues.

    Args:
        max_attempts: Maximum retry attempts (default 3)
        base_delay: Base delay in seconds for exponential backoff (default 1.0)
    """

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            last_exception = None

            for attempt in range(max_attempts):
                try:
                    return await func(*args, **kwargs)
                except anthropic.APIConnectionError as e:
                    last_exception = e

                    if attempt < max_attempts - 1:
                        # Exponential backoff with jitter
                        delay = base_delay * (2**attempt)
                        jitter = delay * 0.1 * (2 * random.random() - 1)
                        sleep_time = delay + jitter

                        logger.warning(
                            "Connection error on attempt %d/%d, retrying in %.1fs...",
                            attempt + 1,
                            max_attempts,
                            sleep_time,
                        )
                        await asyncio.sleep(sleep_time)
                    else:
                        logger.error("All %d attempts failed", max_attempts)

            raise ServiceUnavailableError(
                "AI service temporarily unavailable after retries"
            ) from last_exception

        return wrapper

    return decorator


def _translate_status_error(e: anthropic.APIStatusError) -> Exception:
    if isinstance(e, anthropic.RateLimitError):
        return RateLimitError("Too many requests, please try again in 1 minute")
    if e.status_code >= 500:
        return ServiceUnavailableError("AI service error")
    return ValueError(f"Request error: {e.message}")


class JournalAIService:
    """Centralized Claude API integration for all journal AI features."""

    def __init__(self):
        timeout = httpx.Timeout(
            timeout=settings.anthropic_timeout,
            connect=settings.anthropic_connect_timeout,
        )
        self.client = Anthropic(api_key=settings.anthropic_api_key, timeout=timeout)
        self.summary_model = settings.summary_model
        self.vision_model = settings.vision_model

    # =========================================================================
    # SCHEMA VALIDATION + CONVERSATIONAL RETRY
    # =========================================================================

    def _call_with_schema_retry(
        self,
        messages: list[dict],
        schema_class: type[BaseModel],
        request_params: dict,
        max_retries: int = 2,
        prefill: str | None = "{",
    ) -> tuple[dict, str]:
        """
        Call Claude API with JSON schema validation and conversational retry.

        On schema failure: appends the bad response + error feedback to messages,
        re-calls with full conversation context so the LLM can self-correct.

        Args:
            messages: The messages list (will be mutated on retry)
            schema_class: Pydantic model class to validate against
            request_params: Dict of params for client.messages.create
                            (model, max_tokens, system, etc.)
                            NOTE: do NOT include 'messages' - they're passed separately
            max_retries: Number of retry attempts after initial call (default 2, so 3 total)
            prefill: Assistant prefill string, or None for no prefill

        Returns:
            (validated_dict, raw_response_text) tuple

        Raises:
            ValueError: If all attempts fail schema validation
        """
        adapter = TypeAdapter(schema_class)

        for attempt in range(1 + max_retries):
            call_messages = list(messages)
            if prefill:
                call_messages.append({"role": "assistant", "content": prefill})

            response = self.client.messages.create(
                messages=call_messages,
                **request_params,
            )

            response_text = ""
            for block in response.content:
                if hasattr(block, "text"):
                    response_text += block.text

            if not response_text:
                if attempt < max_retries:
                    messages.append({"role": "assistant", "content": "(empty response)"})
                    messages.append(
                        {
                            "role": "user",
                            "content": "Your response contained no text. Please respond with valid JSON.",
                        }
                    )
                    continue
                raise ValueError("No text content in AI response after retries")

            raw_text = response_text.strip()
            json_str = (prefill or "") + raw_text

            json_str = _strip_markdown_json(json_str)
            json_str = _fix_trailing_commas(json_str)

            try:
                parsed = json.loads(json_str)
                validated = adapter.validate_python(parsed)
                return validated.model_dump(), raw_text
            except (json.JSONDecodeError, ValidationError) as e:
                error_msg = str(e)
                logger.warning(
                    "AI response schema validation failed (attempt %d/%d) for %s: %s",
                    attempt + 1,
                    1 + max_retries,
                    schema_class.__name__,
                    error_msg,
                )

                if attempt < max_retries:
                    messages.append(
                        {"role": "assistant", "content": (prefill or "") + raw_text}
                    )
                    messages.append(
                        {
                            "role": "user",
                            "content": (
                                f"Your response had a schema error:\n{error_msg}\n\n"
                                f"Please fix and return valid JSON matching the required schema."
                            ),
                        }
                    )
                    continue

                raise ValueError(
                    f"AI response failed schema validation after {1 + max_retries} attempts: {error_msg}"
                )

        raise ValueError("AI response failed schema validation")

    @staticmethod
    def _image_block(data_url: str) -> dict:
        media_type, data = split_data_url(data_url)
        return {
            "type": "image",
            "source": {"type": "base64", "media_type": media_type, "data": data},
        }

    # =========================================================================
    # ENTRY SUMMARY
    # =========================================================================

    async def summarize_entry(self, transcription: str) -> JournalSummary:
        """
        Extract structured health data from a journal transcription.

        Args:
            transcription: Text of the spoken (or typed) journal entry

        Returns:
            JournalSummary; the neutral summary when the AI call or its
            output fails
        """
        messages = [
            {
                "role": "user",
                "content": f"Analyze this journal entry:\n\n{transcription}",
            }
        ]
        request_params = {
            "model": self.summary_model,
            "max_tokens": 1024,
            "system": ENTRY_SUMMARY_SYSTEM_PROMPT,
        }

        try:
            validated, _raw = self._call_with_schema_retry(
                messages=messages,
                schema_class=JournalSummarySchema,
                request_params=request_params,
            )
            return JournalSummary.model_validate(validated)
        except (anthropic.APIError, ValueError) as e:
            logger.warning("Entry summary failed, using neutral summary: %s", e)
            return JournalSummary.neutral()

    # =========================================================================
    # STOOL PHOTO ANALYSIS
    # =========================================================================

    async def analyze_stool_image(self, image_data_url: str) -> ImageAnalysisResult:
        """
        Detect red and brown regions on a stool photo.

        Args:
            image_data_url: Base64 image data URL

        Returns:
            ImageAnalysisResult with normalized bounding boxes; empty lists
            when the AI call or its output fails

        Raises:
            ValueError: If image_data_url is not a base64 image data URL
        """
        image_block = self._image_block(image_data_url)
        messages = [
            {
                "role": "user",
                "content": [
                    image_block,
                    {"type": "text", "text": "Locate red and brown regions in this image."},
                ],
            }
        ]
        request_params = {
            "model": self.vision_model,
            "max_tokens": 1024,
            "system": STOOL_IMAGE_SYSTEM_PROMPT,
        }

        try:
            validated, _raw = self._call_with_schema_retry(
                messages=messages,
                schema_class=StoolImageAnalysisSchema,
                request_params=request_params,
            )
            return ImageAnalysisResult.model_validate(validated)
        except (anthropic.APIError, ValueError) as e:
            logger.warning("Stool image analysis failed, returning no detections: %s", e)
            return ImageAnalysisResult.empty()

    # =========================================================================
    # TREND ANALYSIS
    # =========================================================================

    @retry_on_connection_error(max_attempts=3, base_delay=1.0)
    async def generate_trend_analysis(
        self, summaries: Sequence[JournalSummary]
    ) -> TrendAnalysisSchema:
        """
        Analyze trends across summaries ordered earliest to most recent.

        Returns:
            TrendAnalysisSchema; the zeroed fallback when the model output
            never validates

        Raises:
            ServiceUnavailableError: AI service unavailable
            RateLimitError: Too many requests
            ValueError: Request rejected by the API
        """
        payload = json.dumps(
            [s.model_dump(mode="json", by_alias=True) for s in summaries], indent=2
        )
        messages = [
            {
                "role": "user",
                "content": f"Analyze these journal summaries:\n\n{payload}",
            }
        ]
        request_params = {
            "model": self.summary_model,
            "max_tokens": 2048,
            "system": TREND_ANALYSIS_SYSTEM_PROMPT,
        }

        try:
            validated, _raw = self._call_with_schema_retry(
                messages=messages,
                schema_class=TrendAnalysisSchema,
                request_params=request_params,
            )
        except anthropic.APIStatusError as e:
            raise _translate_status_error(e) from e
        except ValueError as e:
            logger.warning("Trend analysis output unusable, returning fallback: %s", e)
            return TrendAnalysisSchema.fallback()

        return TrendAnalysisSchema.model_validate(validated)

    # =========================================================================
    # SCANNERS
    # =========================================================================

    def _scan(
        self,
        image_data_url: str,
        profile: DietaryProfile,
        system_prompt: str,
        schema_class: type[BaseModel],
    ) -> dict:
        messages = [
            {
                "role": "user",
                "content": [
                    self._image_block(image_data_url),
                    {"type": "text", "text": build_profile_context(profile.describe())},
                ],
            }
        ]
        request_params = {
            "model": self.vision_model,
            "max_tokens": 4096,
            "system": system_prompt,
        }

        try:
            validated, _raw = self._call_with_schema_retry(
                messages=messages,
                schema_class=schema_class,
                request_params=request_params,
            )
        except anthropic.APIStatusError as e:
            raise _translate_status_error(e) from e

        if validated.get("error") == UNREADABLE_IMAGE:
            raise UnreadableImageError(
                "The image could not be read. Please try a clearer photo."
            )
        return validated

    @retry_on_connection_error(max_attempts=3, base_delay=1.0)
    async def scan_menu(
        self, image_data_url: str, profile: DietaryProfile
    ) -> MenuScanSchema:
        """
        Rate each dish on a menu photo against the dietary profile.

        Raises:
            UnreadableImageError: Photo is not a readable menu
            ServiceUnavailableError: AI service unavailable
            RateLimitError: Too many requests
            ValueError: Invalid image or response format
        """
        validated = self._scan(
            image_data_url, profile, MENU_SCAN_SYSTEM_PROMPT, MenuScanSchema
        )
        return MenuScanSchema.model_validate(validated)

    @retry_on_connection_error(max_attempts=3, base_delay=1.0)
    async def scan_ingredients(
        self, image_data_url: str, profile: DietaryProfile
    ) -> IngredientScanSchema:
        """
        Rate each ingredient on a label photo against the dietary profile.

        Raises:
            UnreadableImageError: Photo is not a readable ingredient label
            ServiceUnavailableError: AI service unavailable
            RateLimitError: Too many requests
            ValueError: Invalid image or response format
        """
        validated = self._scan(
            image_data_url, profile, INGREDIENT_SCAN_SYSTEM_PROMPT, IngredientScanSchema
        )
        return IngredientScanSchema.model_validate(validated)


# =============================================================================
# CUSTOM EXCEPTIONS
# =============================================================================


class ServiceUnavailableError(Exception):
    """AI service is temporarily unavailable."""

    pass


class RateLimitError(Exception):
    """Rate limit exceeded."""

    pass


class UnreadableImageError(ValueError):
    """The model could not read the scanned image."""

    pass
