from __future__ import annotations

# Ensure the repository root is on sys.path so that absolute imports like `routine_viewer.*`
# work when Streamlit runs this file from within the package directory.
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

import hashlib
import logging
from typing import List, Optional
from urllib.parse import urlparse

import streamlit as st
from streamlit_js_eval import streamlit_js_eval

from routine_viewer.config import configure_logging, get_settings
from routine_viewer.errors import MicrophoneUnavailable
from routine_viewer.services.assistant import (
    STATUS_MESSAGES,
    AssistantStatus,
    GroqPlanAssistant,
    VoiceEditPipeline,
)
from routine_viewer.services.shell import ViewerState
from routine_viewer.services.url_codec import Address, build_share_link, resolve_address
from routine_viewer.services.voice_capture import RecordedAudioSource, VoiceCapture

st.set_page_config(page_title="Mi Rutina", page_icon="💪", layout="centered")
settings = get_settings()
configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger("routine_viewer.app")

st.markdown("""
<style>
.day-card{
  background: #fff; border: 1px solid #f3f4f6; border-radius: 24px;
  box-shadow: 0 10px 25px rgba(0,0,0,.08); overflow: hidden;
}
.day-head{
  background: linear-gradient(135deg, #4f46e5, #7e22ce);
  color: #fff; padding: 1.4rem 1.5rem;
}
.day-label{ text-transform: uppercase; letter-spacing: .08em; font-size: .75rem; font-weight: 700; opacity: .9; }
.day-title{ margin: .3rem 0 0 0 !important; color: #fff !important; font-size: 1.7rem; }
.ex-list{ padding: 1rem; display: flex; flex-direction: column; gap: .7rem; }
.ex-row{
  display: flex; align-items: center; gap: 1rem;
  background: #f9fafb; border: 1px solid #f3f4f6; border-radius: 16px; padding: .9rem 1rem;
}
.ex-num{
  width: 44px; height: 44px; border-radius: 14px; background: #fff; color: #4f46e5;
  display: flex; align-items: center; justify-content: center; font-weight: 700; font-size: 1.1rem;
  border: 1px solid #eef2ff; flex-shrink: 0;
}
.ex-name{ font-weight: 700; color: #1f2937; }
.ex-meta{ display: flex; gap: .8rem; margin-top: .35rem; }
.chip{ background: #fff; border-radius: 6px; padding: 2px 8px; font-size: .75rem; color: #6b7280; }
.ex-empty{ color: #9ca3af; text-align: center; padding: 1rem; }
.day-foot{
  background: #f9fafb; border-top: 1px solid #f3f4f6; text-align: center; padding: .8rem;
  font-size: .72rem; color: #9ca3af; text-transform: uppercase; letter-spacing: .06em; font-weight: 600;
}
.dots{ display: flex; gap: 6px; justify-content: center; align-items: center; height: 100%; padding-top: .6rem; }
.dot{ width: 8px; height: 8px; border-radius: 999px; background: #d1d5db; }
.dot.on{ width: 16px; background: #4f46e5; }
.example{
  background: #f9fafb; border: 1px solid #e5e7eb; border-radius: 12px; padding: .6rem .8rem;
  font-family: monospace; font-size: .8rem; color: #4b5563; word-break: break-all;
}
</style>
""", unsafe_allow_html=True)


def page_address() -> Optional[Address]:
    """The server has the path and query; the fragment has to come from the
    browser, which reports ``location.href`` one rerun later."""
    address = resolve_address(st.context.url or "", st.query_params, None)
    if address is not None:
        return address
    href = streamlit_js_eval(js_expressions="window.parent.location.href", key="page-href")
    return resolve_address(st.context.url or "", st.query_params, href)


def dots_html(dots: List[bool]) -> str:
    return "<div class='dots'>" + "".join(
        f"<span class='dot{' on' if on else ''}'></span>" for on in dots
    ) + "</div>"


def render_loading() -> None:
    with st.spinner("Cargando rutina…"):
        st.empty()


def render_guidance(viewer: ViewerState) -> None:
    host = urlparse(settings.PUBLIC_URL).netloc or "tu-sitio.app"
    with st.container(border=True):
        if viewer.mode == "error":
            st.markdown("## ⚠️ Error al cargar")
            st.error(viewer.error_message or "No se pudo leer la rutina.")
            st.caption("Asegúrate de copiar todo el código JSON correctamente en la URL.")
            return
        st.markdown("## 📄 Esperando Rutina")
        st.write("Para ver tu rutina, pega el código JSON al final de la dirección web.")
        st.caption("OPCIÓN 1 (RECOMENDADA)")
        st.markdown(f"<div class='example'>{host}/<b>[{{\"day\":\"Lunes\"...}}]</b></div>", unsafe_allow_html=True)
        st.caption("OPCIÓN 2 (SI FALLA LA ANTERIOR)")
        st.markdown(f"<div class='example'>{host}/<b>#</b><b>[{{\"day\":\"Lunes\"...}}]</b></div>", unsafe_allow_html=True)


def render_plan(viewer: ViewerState) -> None:
    view = viewer.view()
    if view is None:
        return

    head_l, head_r = st.columns([5, 1])
    with head_l:
        st.markdown("## Mi Rutina")
        st.caption(view.position_label)
    with head_r:
        st.markdown("<div style='font-size:2rem;text-align:right'>🏋️</div>", unsafe_allow_html=True)

    st.markdown(view.card_html, unsafe_allow_html=True)
    st.write("")

    nav_prev, nav_dots, nav_next = st.columns([2, 3, 2])
    with nav_prev:
        st.button("◀", key="nav-prev", disabled=not view.previous_enabled,
                  on_click=viewer.previous, width="stretch")
    with nav_dots:
        st.markdown(dots_html(view.dots), unsafe_allow_html=True)
    with nav_next:
        st.button("▶", key="nav-next", disabled=not view.next_enabled, type="primary",
                  on_click=viewer.next, width="stretch")

    if viewer.edit_count and viewer.plan:
        with st.expander("🔗 Enlace a tu rutina actualizada"):
            st.caption("Los cambios solo viven en esta sesión. Guarda este enlace para conservarlos.")
            st.code(build_share_link(settings.PUBLIC_URL, viewer.plan), language=None)


def _show_last_result() -> None:
    last = st.session_state.get("voice-last")
    if not last:
        return
    with st.container(border=True):
        if last.transcript:
            st.markdown(f"*\"{last.transcript}\"*")
        if last.error:
            st.error(f"Ocurrió un error procesando tu solicitud: {last.error}")
        elif last.updated:
            st.success("¡Rutina actualizada exitosamente!")
        else:
            st.info("No entendí un cambio en la grabación; la rutina sigue igual.")
        if st.button("✕ Cerrar", key="voice-dismiss"):
            st.session_state["voice-last"] = None
            st.rerun()


def render_assistant(viewer: ViewerState) -> None:
    st.markdown("#### ✨ Asistente de voz")
    recording = st.audio_input("Graba tu pedido, por ejemplo: «cambia sentadillas por prensa»", key="voice-input")
    if recording is None:
        _show_last_result()
        return

    digest = hashlib.sha1(recording.getvalue()).hexdigest()
    if st.session_state.get("voice-digest") == digest:
        _show_last_result()
        return
    st.session_state["voice-digest"] = digest

    status_box = st.empty()

    def show_status(status: AssistantStatus) -> None:
        if status in STATUS_MESSAGES:
            status_box.info(STATUS_MESSAGES[status])
        else:
            status_box.empty()

    pipeline = VoiceEditPipeline(GroqPlanAssistant(), on_status=show_status)
    with VoiceCapture(RecordedAudioSource(recording)) as capture:
        try:
            clip = pipeline.record(capture)
        except MicrophoneUnavailable as e:
            st.session_state["voice-last"] = None
            st.error(str(e))
            return

    with st.spinner("Procesando con IA…"):
        result = pipeline.attempt(clip, viewer.plan or [])
    st.session_state["voice-last"] = result
    if result.plan is not None:
        viewer.replace_plan(result.plan)
        st.rerun()
    _show_last_result()


if "viewer" not in st.session_state:
    st.session_state["viewer"] = ViewerState()

viewer: ViewerState = st.session_state["viewer"]
if viewer.is_loading:
    address = page_address()
    if address is not None:
        viewer.load(address)
        logger.info("New session: view mode %s.", viewer.mode)

if viewer.mode == "loading":
    render_loading()
elif viewer.mode == "plan":
    render_plan(viewer)
    if settings.GROQ_API_KEY:
        st.divider()
        render_assistant(viewer)
else:
    render_guidance(viewer)
