"""Voice edits: transcribe a clip, then ask the model for an updated plan.

The pipeline only knows the ``PlanAssistant`` interface; ``GroqPlanAssistant``
is the hosted implementation used by the app.
"""
from __future__ import annotations

import enum
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Protocol

from pydantic import ValidationError

from routine_viewer.config import get_settings
from routine_viewer.errors import TranscriptionError, UpdateError
from routine_viewer.llm import LLMError, chat_json, transcribe
from routine_viewer.models import PlanEditResponse, WorkoutPlan, dump_plan
from routine_viewer.services.voice_capture import AudioClip, VoiceCapture


logger = logging.getLogger(__name__)

PROMPTS_DIR = Path(__file__).resolve().parents[1] / "prompts" / "jobs"

TRANSCRIPTION_FAILED_MESSAGE = "No se pudo transcribir el audio."
UPDATE_FAILED_MESSAGE = "No se pudo actualizar la rutina."


def _load_prompt(name: str) -> str:
    return (PROMPTS_DIR / name).read_text(encoding="utf-8")


class PlanAssistant(Protocol):
    def transcribe(self, audio: bytes, mime_type: str) -> str: ...

    def edit(self, plan: WorkoutPlan, instruction: str) -> WorkoutPlan: ...


class GroqPlanAssistant:
    def transcribe(self, audio: bytes, mime_type: str) -> str:
        settings = get_settings()
        try:
            return transcribe(
                audio=audio,
                mime_type=mime_type or "audio/wav",
                prompt=_load_prompt("transcribe.md").strip(),
                language=settings.TRANSCRIBE_LANGUAGE,
            )
        except LLMError as e:
            logger.warning("Transcription error: %s", e)
            raise TranscriptionError(TRANSCRIPTION_FAILED_MESSAGE) from e

    def edit(self, plan: WorkoutPlan, instruction: str) -> WorkoutPlan:
        settings = get_settings()
        system = _load_prompt("edit_plan.md").replace("{language}", settings.PLAN_LANGUAGE)
        payload = {
            "PLAN": dump_plan(plan),
            "REQUEST": instruction,
        }
        try:
            resp = chat_json(
                schema=PlanEditResponse.model_json_schema(),
                system=system,
                user=json.dumps(payload, ensure_ascii=False),
            )
            return PlanEditResponse.model_validate(resp).plan
        except (LLMError, ValidationError) as e:
            logger.warning("Routine modification error: %s", e)
            raise UpdateError(UPDATE_FAILED_MESSAGE) from e


class AssistantStatus(str, enum.Enum):
    IDLE = "idle"
    RECORDING = "recording"
    TRANSCRIBING = "transcribing"
    UPDATING = "updating"
    DONE = "done"
    ERROR = "error"


STATUS_MESSAGES = {
    AssistantStatus.RECORDING: "Escuchando... (detén la grabación para terminar)",
    AssistantStatus.TRANSCRIBING: "Transcribiendo audio...",
    AssistantStatus.UPDATING: "Actualizando rutina...",
}


@dataclass
class EditResult:
    transcript: str
    plan: Optional[WorkoutPlan] = None
    error: Optional[str] = None

    @property
    def updated(self) -> bool:
        return self.plan is not None


class VoiceEditPipeline:
    """Runs transcribe -> edit once per clip. No retries, no cancellation."""

    def __init__(
        self,
        assistant: PlanAssistant,
        *,
        min_transcript_chars: int | None = None,
        on_status: Callable[[AssistantStatus], None] | None = None,
    ) -> None:
        self.assistant = assistant
        if min_transcript_chars is None:
            min_transcript_chars = get_settings().MIN_TRANSCRIPT_CHARS
        self.min_transcript_chars = min_transcript_chars
        self.on_status = on_status
        self.status = AssistantStatus.IDLE
        self.transcript = ""

    def _set(self, status: AssistantStatus) -> None:
        self.status = status
        if self.on_status is not None:
            self.on_status(status)

    def record(self, capture: VoiceCapture) -> AudioClip:
        """Start and finish one capture. ``MicrophoneUnavailable`` propagates
        before any status change."""
        capture.start()
        self._set(AssistantStatus.RECORDING)
        return capture.stop()

    def run(self, clip: AudioClip, plan: WorkoutPlan) -> EditResult:
        """Return the transcript and, when the edit ran, the replacement plan.

        ``plan`` is never modified. On failure the status is ERROR and the
        ``TranscriptionError`` / ``UpdateError`` propagates.
        """
        self.transcript = ""
        try:
            self._set(AssistantStatus.TRANSCRIBING)
            text = self.assistant.transcribe(clip.data, clip.mime_type)
            self.transcript = text
            result = EditResult(transcript=text)

            if len(text.strip()) < self.min_transcript_chars:
                logger.info("Transcript too short (%d chars); skipping edit.", len(text.strip()))
                self._set(AssistantStatus.DONE)
                return result

            self._set(AssistantStatus.UPDATING)
            result.plan = self.assistant.edit(plan, text.strip())
        except (TranscriptionError, UpdateError):
            self._set(AssistantStatus.ERROR)
            raise
        self._set(AssistantStatus.DONE)
        logger.info("Plan updated by voice: %d day(s).", len(result.plan))
        return result

    def attempt(self, clip: AudioClip, plan: WorkoutPlan) -> EditResult:
        """Like ``run``, but a failure comes back as a result carrying ``error``
        so the caller can show it in place of any earlier outcome."""
        try:
            return self.run(clip, plan)
        except (TranscriptionError, UpdateError) as e:
            return EditResult(transcript=self.transcript, error=str(e))
