import json
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from dictation.domain import PolishMetadata, Word
from dictation.exceptions import PolishingError
from dictation.infrastructure import GeminiPolisher


def _polisher(response_text=None, error=None):
    client = MagicMock()
    if error:
        client.models.generate_content.side_effect = error
    else:
        client.models.generate_content.return_value = SimpleNamespace(text=response_text)
    return GeminiPolisher(client, "gemini-2.5-flash", "system prompt", 2048), client


def _metadata():
    return PolishMetadata(
        words=[Word(text="hola", confidence=0.5, user_edited=True)], partial_count=1
    )


def test_polish_parses_json_wrapped_in_prose():
    payload = {
        "text": "Hola.",
        "segments": [{"start": 0.0, "end": 1.0, "text": "Hola."}],
        "uncertain_words": [{"word": "hola", "position": 0, "confidence": 0.5}],
    }
    polisher, client = _polisher(f"Aquí está:\n```json\n{json.dumps(payload)}\n```")

    result = polisher.polish("hola", _metadata())

    assert result.text == "Hola."
    assert result.segments[0].end == 1.0
    assert result.uncertain_words[0].word == "hola"
    kwargs = client.models.generate_content.call_args.kwargs
    assert kwargs["model"] == "gemini-2.5-flash"
    assert kwargs["config"] == {"system_instruction": "system prompt", "max_output_tokens": 2048}


def test_polish_without_json_returns_raw_text():
    polisher, _ = _polisher("Hola, ¿cómo está?")

    result = polisher.polish("hola como esta", _metadata())

    assert result.text == "Hola, ¿cómo está?"
    assert result.segments == []
    assert result.uncertain_words == []


def test_polish_with_malformed_json_returns_raw_text():
    raw = '{"text": "Hola", "segments": [,]}'
    polisher, _ = _polisher(raw)

    result = polisher.polish("hola", _metadata())

    assert result.text == raw
    assert result.segments == []


def test_polish_with_null_lists_keeps_text():
    polisher, _ = _polisher('{"text": "Hola.", "segments": null, "uncertain_words": null}')

    result = polisher.polish("hola", _metadata())

    assert result.text == "Hola."
    assert result.uncertain_words == []


def test_polish_wraps_client_errors():
    boom = RuntimeError("connection reset")
    polisher, _ = _polisher(error=boom)

    with pytest.raises(PolishingError) as exc_info:
        polisher.polish("hola", _metadata())

    assert exc_info.value.cause is boom


def test_polish_empty_response_falls_back_to_empty_text():
    polisher, _ = _polisher("")

    result = polisher.polish("hola", _metadata())

    assert result.text == ""
    assert result.segments == []
    assert result.uncertain_words == []


def test_polish_blocked_response_falls_back_to_empty_text():
    polisher, _ = _polisher(None)

    result = polisher.polish("hola", _metadata())

    assert result.text == ""


def test_user_message_includes_word_metadata_without_edit_flag():
    message = GeminiPolisher.build_user_message("hola", _metadata())

    assert message.startswith("Transcripción automática:\n\nhola\n\n")
    assert "Metadatos de palabras:" in message
    assert "user_edited" not in message
    assert '"confidence": 0.5' in message


def test_validate_api_key():
    polisher, client = _polisher("{}")
    assert polisher.validate_api_key() is True

    client.models.list.side_effect = RuntimeError("API key not valid")
    assert polisher.validate_api_key() is False
