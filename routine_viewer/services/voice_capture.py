"""Recording a short voice clip.

The microphone is reached through a ``MicrophoneSource`` so the capture logic
can be driven by a fake in tests. Under Streamlit the browser does the actual
recording (``st.audio_input``) and ``RecordedAudioSource`` hands its bytes over.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Protocol

from routine_viewer.errors import MicrophoneUnavailable


logger = logging.getLogger(__name__)

MICROPHONE_UNAVAILABLE_MESSAGE = "No se pudo acceder al micrófono. Por favor verifica los permisos."

_CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class AudioClip:
    data: bytes
    mime_type: str = "audio/wav"


class AudioStream(Protocol):
    mime_type: str

    def read_chunks(self) -> Iterable[bytes]: ...

    def close(self) -> None: ...


class MicrophoneSource(Protocol):
    def open(self) -> AudioStream:
        """Acquire the device. Raises ``MicrophoneUnavailable``."""
        ...


class VoiceCapture:
    """One recording session at a time over a microphone source."""

    def __init__(self, source: MicrophoneSource) -> None:
        self._source = source
        self._stream: Optional[AudioStream] = None

    @property
    def is_recording(self) -> bool:
        return self._stream is not None

    def start(self) -> None:
        if self._stream is not None:
            return
        self._stream = self._source.open()
        logger.info("Recording started (%s).", self._stream.mime_type)

    def stop(self) -> AudioClip:
        if self._stream is None:
            raise RuntimeError("stop() called without an active recording.")
        stream = self._stream
        try:
            chunks: List[bytes] = [c for c in stream.read_chunks() if c]
            clip = AudioClip(data=b"".join(chunks), mime_type=stream.mime_type)
        finally:
            self.release()
        logger.info("Recording stopped: %d bytes.", len(clip.data))
        return clip

    def release(self) -> None:
        """Free the device; safe to call at any time."""
        stream, self._stream = self._stream, None
        if stream is not None:
            stream.close()

    def __enter__(self) -> "VoiceCapture":
        return self

    def __exit__(self, *exc: object) -> None:
        self.release()


class _BufferStream:
    def __init__(self, data: bytes, mime_type: str) -> None:
        self.mime_type = mime_type
        self._data: Optional[bytes] = data

    def read_chunks(self) -> Iterator[bytes]:
        data = self._data or b""
        for i in range(0, len(data), _CHUNK_SIZE):
            yield data[i:i + _CHUNK_SIZE]

    def close(self) -> None:
        self._data = None


class RecordedAudioSource:
    """Source backed by the value of ``st.audio_input`` (an UploadedFile or None).

    In the app a denied microphone never gets this far: the browser widget
    reports the permission error itself and hands back None, so the page
    skips the capture. ``open`` still refuses None or an empty recording for
    callers that build the source directly.
    """

    def __init__(self, recording: object | None) -> None:
        self._recording = recording

    def open(self) -> AudioStream:
        if self._recording is None:
            raise MicrophoneUnavailable(MICROPHONE_UNAVAILABLE_MESSAGE)
        data = self._recording.getvalue()  # type: ignore[attr-defined]
        if not data:
            raise MicrophoneUnavailable(MICROPHONE_UNAVAILABLE_MESSAGE)
        mime_type = getattr(self._recording, "type", None) or "audio/wav"
        return _BufferStream(data, mime_type)
