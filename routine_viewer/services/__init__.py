from .url_codec import Address, decode_address, address_from_query_params, address_from_url, resolve_address, build_share_link, encode_plan_path
from .pager import Pager
from .card import render_day_card, exercise_line
from .voice_capture import AudioClip, VoiceCapture, RecordedAudioSource
from .assistant import AssistantStatus, EditResult, GroqPlanAssistant, PlanAssistant, VoiceEditPipeline
from .shell import PlanView, ViewerState

__all__ = [
    "Address",
    "decode_address",
    "address_from_query_params",
    "address_from_url",
    "resolve_address",
    "build_share_link",
    "encode_plan_path",
    "Pager",
    "render_day_card",
    "exercise_line",
    "AudioClip",
    "VoiceCapture",
    "RecordedAudioSource",
    "AssistantStatus",
    "EditResult",
    "GroqPlanAssistant",
    "PlanAssistant",
    "VoiceEditPipeline",
    "PlanView",
    "ViewerState",
]
