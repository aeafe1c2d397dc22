"""Gemini implementation of the PolishingService interface."""

import json
import re

from google import genai
from google.genai import errors as genai_errors
from pydantic import ValidationError

from dictation.domain.models import PolishMetadata, PolishResult
from dictation.exceptions import PolishingError
from dictation.logging import setup_logging

from .interfaces import PolishingService

logger = setup_logging()

JSON_OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")


class GeminiPolisher(PolishingService):
    """Polishes merged transcripts using Google Gemini."""

    def __init__(
        self,
        client: genai.Client,
        model_name: str,
        system_prompt: str,
        max_output_tokens: int = 4096,
    ):
        self._client = client
        self._model_name = model_name
        self._system_prompt = system_prompt
        self._max_output_tokens = max_output_tokens

    def polish(self, text: str, metadata: PolishMetadata) -> PolishResult:
        """
        Sends the merged transcript to Gemini and parses the edited result.

        Malformed model output never fails the call: when no JSON object can be
        recovered the raw response text is returned with no segments and no
        uncertain words.

        Raises:
            PolishingError: If the Gemini API call fails.
        """
        try:
            response = self._client.models.generate_content(
                model=self._model_name,
                contents=self.build_user_message(text, metadata),
                config={
                    "system_instruction": self._system_prompt,
                    "max_output_tokens": self._max_output_tokens,
                },
            )
        except genai_errors.APIError as e:
            logger.exception(
                "Gemini API error", extra={"status": e.code, "body": e.message}
            )
            raise PolishingError(f"status {e.code}: {e.message}", cause=e) from e
        except Exception as e:
            logger.exception("Gemini API call failed")
            raise PolishingError(str(e), cause=e) from e

        if not response.text:
            logger.warning("Gemini returned empty response", extra={"model": self._model_name})

        result = self.parse_response(response.text or "")
        logger.info(
            "Transcript polished",
            extra={
                "original_length": len(text),
                "polished_length": len(result.text),
                "uncertain_count": len(result.uncertain_words),
            },
        )
        return result

    def validate_api_key(self) -> bool:
        """Returns whether Gemini accepts the client's API key."""
        try:
            self._client.models.list()
        except Exception:
            logger.warning("Gemini API key validation failed", exc_info=True)
            return False
        return True

    @staticmethod
    def build_user_message(text: str, metadata: PolishMetadata) -> str:
        message = "Transcripción automática:\n\n"
        message += text + "\n\n"

        if metadata.words:
            words = [w.model_dump(exclude={"user_edited"}) for w in metadata.words]
            message += "Metadatos de palabras:\n"
            message += json.dumps(words, indent=4, ensure_ascii=False)

        return message

    @staticmethod
    def parse_response(content: str) -> PolishResult:
        """Extracts the JSON object from a model response, or falls back to raw text."""
        match = JSON_OBJECT_PATTERN.search(content)
        if match:
            try:
                parsed = json.loads(match.group(0))
                if parsed:
                    return PolishResult.model_validate(parsed)
            except (json.JSONDecodeError, ValidationError):
                logger.warning(
                    "Failed to parse Gemini JSON response", extra={"content": content}
                )

        return PolishResult(text=content, segments=[], uncertain_words=[])
