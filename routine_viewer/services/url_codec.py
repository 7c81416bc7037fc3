"""Reading a workout plan out of the page address, and writing one back in.

A plan travels as a JSON array in one of three places, tried in order:

    https://host/[{"day":"Lunes",...}]          path
    https://host/?data=[{"day":"Lunes",...}]    query (``data`` or ``routine``)
    https://host/#[{"day":"Lunes",...}]         fragment

Browsers percent-encode some of it and people paste already-encoded text, so
the payload is parsed decoded first, then raw, then decoded twice.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace
from typing import Any, List, Literal, Mapping, Optional
from urllib.parse import quote, unquote, urlsplit

from pydantic import ValidationError

from routine_viewer.errors import MalformedPayload
from routine_viewer.models.plan import WorkoutPlan, dump_plan, validate_plan


logger = logging.getLogger(__name__)

PAYLOAD_KEYS = ("data", "routine")

INVALID_JSON_MESSAGE = "El formato de la URL no es un JSON válido."
INVALID_SHAPE_MESSAGE = "El formato de la rutina no es válido. Debe ser un arreglo JSON de días."


@dataclass(frozen=True)
class Address:
    path: str = ""
    query: str = ""
    fragment: str = ""


def _strip_separator(text: str, sep: str) -> str:
    text = text or ""
    if text.startswith(sep):
        text = text[len(sep):]
    return text


def _strip_key_prefix(text: str) -> str:
    for key in PAYLOAD_KEYS:
        prefix = f"{key}="
        if text.startswith(prefix):
            return text[len(prefix):]
    return text


def raw_payload(address: Address) -> str:
    """Return the first non-empty payload text, path first, or "" if there is none."""
    for text, sep in ((address.path, "/"), (address.query, "?"), (address.fragment, "#")):
        candidate = _strip_separator(text, sep).strip()
        if candidate and candidate != "/":
            return _strip_key_prefix(candidate)
    return ""


def _parse_json(raw: str) -> Any:
    attempts: List[str] = []
    for candidate in (unquote(raw), raw, unquote(unquote(raw))):
        if candidate not in attempts:
            attempts.append(candidate)
    last_error: Optional[json.JSONDecodeError] = None
    for candidate in attempts:
        try:
            return json.loads(candidate)
        except json.JSONDecodeError as e:
            last_error = e
    logger.warning("Address payload is not JSON (%d chars): %s", len(raw), last_error)
    raise MalformedPayload(INVALID_JSON_MESSAGE)


def decode_address(address: Address) -> WorkoutPlan | None:
    """Decode the plan embedded in ``address``.

    Returns ``None`` when no location carries any text (nothing to show yet).
    Raises ``MalformedPayload`` when text was found but is not a non-empty
    array of day objects.
    """
    raw = raw_payload(address)
    if not raw:
        logger.info("No plan in address.")
        return None

    data = _parse_json(raw)
    try:
        plan = validate_plan(data)
    except (ValidationError, ValueError) as e:
        logger.warning("Address payload has the wrong shape: %s", e)
        raise MalformedPayload(INVALID_SHAPE_MESSAGE) from e

    logger.info("Decoded plan with %d day(s) from address.", len(plan))
    return plan


def address_from_url(url: str) -> Address:
    """Split a full page URL (as the browser reports it) into an ``Address``."""
    parts = urlsplit(url or "")
    return Address(path=parts.path, query=parts.query, fragment=parts.fragment)


def address_from_query_params(params: Mapping[str, str]) -> Address:
    """Build the query part of an ``Address`` from ``st.query_params``."""
    for key in PAYLOAD_KEYS:
        value = params.get(key)
        if value:
            return Address(query=f"{key}={value}")
    return Address()


def resolve_address(page_url: str, params: Mapping[str, str],
                    browser_url: Optional[str]) -> Optional[Address]:
    """Combine what the server knows with what the browser reports.

    The server sees the path (``page_url``) and the query (``params``) but
    never the fragment; only the browser's own ``location.href`` carries it.
    ``browser_url`` is None until the page has reported it. Returns None
    while that report is still needed.
    """
    server = address_from_url(page_url)
    server = replace(server, query=address_from_query_params(params).query or server.query, fragment="")
    if raw_payload(server):
        return server
    if browser_url is None:
        return None
    return address_from_url(browser_url)


def encode_plan(plan: WorkoutPlan) -> str:
    return json.dumps(dump_plan(plan), ensure_ascii=False, separators=(",", ":"))


def encode_plan_path(plan: WorkoutPlan) -> str:
    return quote(encode_plan(plan), safe="")


def build_share_link(base_url: str, plan: WorkoutPlan,
                     location: Literal["path", "query", "fragment"] = "path") -> str:
    """Return a link that opens ``plan`` in the viewer."""
    base = base_url.split("#", 1)[0].split("?", 1)[0].rstrip("/")
    if location == "path":
        return f"{base}/{encode_plan_path(plan)}"
    if location == "query":
        return f"{base}/?data={encode_plan_path(plan)}"
    if location == "fragment":
        return f"{base}/#{encode_plan_path(plan)}"
    raise ValueError(f"Unknown link location: {location!r}")
