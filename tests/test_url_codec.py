from __future__ import annotations

import json
from urllib.parse import quote

import pytest

from routine_viewer.errors import MalformedPayload
from routine_viewer.models import dump_plan
from routine_viewer.services.url_codec import (
    Address,
    address_from_query_params,
    address_from_url,
    build_share_link,
    decode_address,
    encode_plan,
    raw_payload,
    resolve_address,
)


SINGLE_DAY = '[{"day":"Lunes","title":"Full Body","exercises":[{"name":"Squat","sets":3,"reps":"12"}]}]'


def _raw(plan) -> str:
    return json.dumps(dump_plan(plan), ensure_ascii=False)


def test_plan_decodes_from_every_location(plan) -> None:
    raw = _raw(plan)
    addresses = {
        "path": Address(path="/" + raw),
        "encoded path": Address(path="/" + quote(raw, safe="")),
        "query": Address(query="?data=" + quote(raw, safe="")),
        "routine query": Address(query="routine=" + raw),
        "fragment": Address(fragment="#" + raw),
        "encoded fragment": Address(fragment="#" + quote(raw, safe="")),
    }
    for where, address in addresses.items():
        assert decode_address(address) == plan, f"decode failed for {where}"


def test_double_encoded_path_is_recovered(plan) -> None:
    raw = _raw(plan)
    twice = quote(quote(raw, safe=""), safe="")
    assert decode_address(Address(path="/" + twice)) == plan


def test_path_wins_over_query_and_fragment(plan) -> None:
    other = [{"day": "Otro", "title": "X", "exercises": []}]
    address = Address(path="/" + _raw(plan), query="data=" + json.dumps(other), fragment=json.dumps(other))
    assert decode_address(address) == plan


def test_empty_path_falls_back_to_query_then_fragment(plan) -> None:
    raw = _raw(plan)
    assert decode_address(Address(path="/", query="", fragment="#" + raw)) == plan
    assert raw_payload(Address(path="/", query="?data=abc", fragment="#def")) == "abc"


def test_empty_address_is_no_data_not_malformed() -> None:
    assert decode_address(Address()) is None
    assert decode_address(Address(path="/", query="?", fragment="#")) is None


@pytest.mark.parametrize("payload", ['{"day":"Lunes"}', "42", '"texto"', "[]", "null", "[1, 2]"])
def test_json_that_is_not_a_day_array_is_malformed(payload: str) -> None:
    with pytest.raises(MalformedPayload):
        decode_address(Address(path="/" + payload))


def test_text_that_is_not_json_is_malformed() -> None:
    with pytest.raises(MalformedPayload) as exc:
        decode_address(Address(fragment="#esto-no-es-json"))
    assert "JSON" in str(exc.value)


def test_numeric_reps_are_accepted() -> None:
    payload = '[{"day":"Lunes","title":"Pierna","exercises":[{"name":"Prensa","sets":"3","reps":12}]}]'
    plan = decode_address(Address(path="/" + payload))
    assert plan is not None
    ex = plan[0].exercises[0]
    assert (ex.sets, ex.reps) == (3, "12")


def test_address_from_query_params() -> None:
    assert address_from_query_params({"utm": "x", "routine": "[1]"}) == Address(query="routine=[1]")
    assert address_from_query_params({"data": "", "routine": ""}) == Address()
    assert address_from_query_params({}) == Address()


def test_address_from_url_splits_every_location(plan) -> None:
    encoded = quote(_raw(plan), safe="")
    assert address_from_url(f"https://rutina.example/{encoded}") == Address(path=f"/{encoded}")
    assert address_from_url(f"https://rutina.example/?data={encoded}") == Address(path="/", query=f"data={encoded}")
    assert address_from_url(f"https://rutina.example/#{encoded}") == Address(path="/", fragment=encoded)
    for url in (
        f"https://rutina.example/{encoded}",
        f"https://rutina.example/?data={encoded}",
        f"https://rutina.example/#{encoded}",
    ):
        assert decode_address(address_from_url(url)) == plan, url


def test_single_day_url_as_the_browser_sends_it() -> None:
    # Browsers percent-encode quotes, braces and spaces in the path
    url = "https://rutina.example/" + quote(SINGLE_DAY, safe=",:")
    plan = decode_address(address_from_url(url))
    assert plan is not None
    assert [d.day for d in plan] == ["Lunes"]
    assert plan[0].exercises[0].name == "Squat"


def test_resolve_address_uses_server_path_without_waiting(plan) -> None:
    encoded = quote(_raw(plan), safe="")
    address = resolve_address(f"https://rutina.example/{encoded}", {}, None)
    assert address == Address(path=f"/{encoded}")


def test_resolve_address_prefers_query_params(plan) -> None:
    address = resolve_address("https://rutina.example/", {"data": _raw(plan)}, None)
    assert address is not None
    assert decode_address(address) == plan


def test_resolve_address_waits_for_the_browser_fragment(plan) -> None:
    encoded = quote(_raw(plan), safe="")
    assert resolve_address("https://rutina.example/", {}, None) is None

    address = resolve_address("https://rutina.example/", {}, f"https://rutina.example/#{encoded}")
    assert address == Address(path="/", fragment=encoded)
    assert decode_address(address) == plan


def test_resolve_address_for_bare_page_is_no_data() -> None:
    address = resolve_address("https://rutina.example/", {}, "https://rutina.example/")
    assert address is not None
    assert decode_address(address) is None


def test_share_links_open_the_same_plan(plan) -> None:
    base = "https://rutina.example/?data=old#stale"
    path_link = build_share_link(base, plan, "path")
    assert path_link.startswith("https://rutina.example/%5B")
    assert decode_address(Address(path=path_link[len("https://rutina.example"):])) == plan

    query_link = build_share_link(base, plan, "query")
    assert decode_address(Address(query=query_link.split("?", 1)[1])) == plan

    fragment_link = build_share_link(base, plan, "fragment")
    assert decode_address(Address(fragment=fragment_link.split("#", 1)[1])) == plan

    with pytest.raises(ValueError):
        build_share_link(base, plan, "cookie")  # type: ignore[arg-type]


def test_encode_plan_keeps_accents(plan) -> None:
    assert "Miércoles" in encode_plan(plan)
