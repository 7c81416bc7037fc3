from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from groq import Groq

from routine_viewer.config import get_settings


logger = logging.getLogger(__name__)


class LLMError(RuntimeError):
    pass


_AUDIO_EXTENSIONS = {
    "audio/wav": "wav",
    "audio/x-wav": "wav",
    "audio/webm": "webm",
    "audio/ogg": "ogg",
    "audio/mpeg": "mp3",
    "audio/mp4": "m4a",
    "audio/flac": "flac",
}


_SUBSCHEMA_LISTS = ("allOf", "anyOf", "oneOf", "prefixItems", "items")
_SUBSCHEMA_MAPS = ("properties", "$defs", "definitions")


def strict_schema(node: Any) -> Any:
    """Return a copy of ``node`` in which every object schema is closed.

    Strict structured outputs reject schemas that allow extra keys, so
    ``additionalProperties`` is forced to false wherever an object appears,
    including inside ``$defs`` and combinators. The input is left untouched.
    """
    if isinstance(node, list):
        return [strict_schema(item) for item in node]
    if not isinstance(node, dict):
        return node

    out: Dict[str, Any] = {}
    for key, value in node.items():
        if key in _SUBSCHEMA_MAPS and isinstance(value, dict):
            out[key] = {name: strict_schema(sub) for name, sub in value.items()}
        elif key in _SUBSCHEMA_LISTS:
            out[key] = strict_schema(value)
        else:
            out[key] = value
    if out.get("type") == "object" or isinstance(out.get("properties"), dict):
        out["additionalProperties"] = False
    return out


def _client() -> Groq:
    settings = get_settings()
    if not settings.GROQ_API_KEY:
        raise LLMError("GROQ_API_KEY is not set; cannot perform LLM call.")
    return Groq(api_key=settings.GROQ_API_KEY)


def chat_json(*, schema: Dict[str, Any], system: str, user: str, temperature: float | None = None) -> Dict[str, Any]:
    """Single strict structured-output call against GROQ_MODEL.
    No retries: the caller surfaces the failure and the user tries again.
    """
    settings = get_settings()
    if not settings.GROQ_MODEL:
        raise LLMError("GROQ_MODEL is not set; cannot perform LLM call.")

    client = _client()
    temp = settings.GROQ_TEMPERATURE if temperature is None else temperature
    requested_model = settings.GROQ_MODEL.strip()

    response_format = {
        "type": "json_schema",
        "json_schema": {
            "name": "strict_schema",
            "schema": strict_schema(schema),
            "strict": True,
        },
    }
    messages = [
        {"role": "system", "content": system},
        {"role": "user", "content": user},
    ]

    logger.info("chat_json model=%s prompt_chars=%d", requested_model, len(system) + len(user))
    try:
        resp = client.chat.completions.create(
            model=requested_model,
            messages=messages,
            temperature=temp,
            response_format=response_format,
        )
    except Exception as e:
        raise LLMError(f"LLM call failed (model='{requested_model}'): {e}") from e

    try:
        content = resp.choices[0].message.content
    except (AttributeError, IndexError, TypeError) as e:
        raise LLMError(f"LLM response carried no message: {e}") from e
    if not content:
        raise LLMError("Empty response content from LLM.")
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise LLMError(f"LLM returned invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise LLMError("LLM returned JSON that is not an object.")
    return data


def transcribe(*, audio: bytes, mime_type: str, prompt: str, language: Optional[str] = None) -> str:
    """Transcribe one audio clip with GROQ_TRANSCRIBE_MODEL. Returns "" for silence."""
    settings = get_settings()
    client = _client()
    model = settings.GROQ_TRANSCRIBE_MODEL.strip()
    ext = _AUDIO_EXTENSIONS.get(mime_type.split(";")[0].strip().lower(), "wav")

    kwargs: Dict[str, Any] = {
        "file": (f"request.{ext}", audio),
        "model": model,
        "prompt": prompt,
        "temperature": 0.0,
    }
    if language:
        kwargs["language"] = language

    logger.info("transcribe model=%s bytes=%d mime=%s", model, len(audio), mime_type)
    try:
        resp = client.audio.transcriptions.create(**kwargs)
    except Exception as e:
        raise LLMError(f"Transcription failed (model='{model}'): {e}") from e
    return (getattr(resp, "text", None) or "").strip()
