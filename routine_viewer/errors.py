"""Error taxonomy for the viewer.

"No data" is not an error: the decoder returns ``None`` and the page shows
the instructional view. Everything here is terminal for the current attempt.
"""
from __future__ import annotations


class RoutineViewerError(Exception):
    """Base class; ``str(exc)`` is safe to show to the user."""


class MalformedPayload(RoutineViewerError):
    pass


class MicrophoneUnavailable(RoutineViewerError):
    pass


class TranscriptionError(RoutineViewerError):
    pass


class UpdateError(RoutineViewerError):
    pass
