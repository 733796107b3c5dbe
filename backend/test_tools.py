import asyncio
import json

import httpx
import pytest

from conftest import SAMPLE_TEMPLATES, UpstreamRecorder
from memegen_mcp.services.memegen import MemegenResponseError
from memegen_mcp.services.tools import (
    InvalidArgumentsError,
    ToolDispatcher,
    UnknownToolError,
)


def call(dispatcher: ToolDispatcher, name: str, arguments=None):
    return json.loads(asyncio.run(dispatcher.call(name, arguments)))


# =============================================================================
# create_meme
# =============================================================================

def test_create_meme_top_and_bottom(dispatcher, upstream):
    result = call(dispatcher, "create_meme", {
        "template_id": "drake",
        "top_text": "Coding in TS",
        "bottom_text": "Coding in C",
    })

    assert result == {
        "url": "https://api.memegen.link/images/drake/Coding_in_TS/Coding_in_C.png",
        "template_id": "drake",
    }
    assert upstream.requests == []


def test_create_meme_without_text_uses_blank_pair(dispatcher):
    result = call(dispatcher, "create_meme", {"template_id": "buzz"})

    assert result["url"] == "https://api.memegen.link/images/buzz/_/_.png"


def test_create_meme_only_bottom_text(dispatcher):
    result = call(dispatcher, "create_meme", {"template_id": "buzz", "top_text": "", "bottom_text": "memes"})

    assert result["url"] == "https://api.memegen.link/images/buzz/memes.png"


def test_create_meme_text_lines_override(dispatcher):
    result = call(dispatcher, "create_meme", {
        "template_id": "gb",
        "top_text": "ignored",
        "bottom_text": "also ignored",
        "text_lines": ["a", "b", "c"],
    })

    assert result["url"] == "https://api.memegen.link/images/gb/a/b/c.png"


def test_create_meme_empty_text_lines_falls_back(dispatcher):
    result = call(dispatcher, "create_meme", {
        "template_id": "drake",
        "top_text": "top",
        "text_lines": [],
    })

    assert result["url"] == "https://api.memegen.link/images/drake/top.png"


def test_create_meme_extension_style_and_font(dispatcher):
    result = call(dispatcher, "create_meme", {
        "template_id": "ds",
        "text_lines": ["one", "two"],
        "style": "maga",
        "font": "impact",
        "extension": "webp",
    })

    assert result["url"] == "https://api.memegen.link/images/ds/one/two.webp?style=maga&font=impact"


def test_create_meme_rejects_unknown_extension(dispatcher):
    with pytest.raises(InvalidArgumentsError) as exc_info:
        asyncio.run(dispatcher.call("create_meme", {"template_id": "drake", "extension": "bmp"}))

    assert exc_info.value.tool == "create_meme"
    assert "extension" in str(exc_info.value)


def test_create_meme_requires_template_id(dispatcher):
    with pytest.raises(InvalidArgumentsError) as exc_info:
        asyncio.run(dispatcher.call("create_meme", {"top_text": "hi"}))

    assert "template_id" in str(exc_info.value)


def test_create_meme_rejects_wrong_types(dispatcher):
    with pytest.raises(InvalidArgumentsError):
        asyncio.run(dispatcher.call("create_meme", {"template_id": 42}))

    with pytest.raises(InvalidArgumentsError):
        asyncio.run(dispatcher.call("create_meme", {"template_id": "drake", "text_lines": "a"}))


def test_optional_arguments_reject_null(dispatcher, upstream):
    for field in ("top_text", "bottom_text", "text_lines", "style", "font", "extension"):
        with pytest.raises(InvalidArgumentsError) as exc_info:
            asyncio.run(dispatcher.call("create_meme", {"template_id": "drake", field: None}))
        assert field in str(exc_info.value)

    with pytest.raises(InvalidArgumentsError):
        asyncio.run(dispatcher.call("list_templates", {"filter": None}))

    assert upstream.requests == []


# =============================================================================
# list_templates
# =============================================================================

def test_list_templates_projection_defaults(dispatcher):
    result = call(dispatcher, "list_templates")

    assert [t["id"] for t in result] == ["drake", "buzz", "ds", "gb"]
    assert result[0] == {
        "id": "drake",
        "name": "Drakeposting",
        "lines": 2,
        "example": "https://api.memegen.link/images/drake/left_on_read/read_receipts_off.png",
        "keywords": ["hotline bling"],
    }
    # Missing fields
    assert result[2] == {
        "id": "ds",
        "name": "Daily Struggle",
        "lines": 2,
        "example": "https://api.memegen.link/images/ds.png",
        "keywords": [],
    }
    # Zero lines and an empty example url also fall back
    assert result[3]["lines"] == 2
    assert result[3]["example"] == "https://api.memegen.link/images/gb.png"


def test_list_templates_forwards_filters(dispatcher, upstream):
    call(dispatcher, "list_templates", {"filter": "brain", "animated": True})

    params = upstream.requests[0].url.params
    assert params["filter"] == "brain"
    assert params["animated"] == "true"


def test_list_templates_rejects_non_bool_animated(dispatcher, upstream):
    with pytest.raises(InvalidArgumentsError):
        asyncio.run(dispatcher.call("list_templates", {"animated": "yes"}))

    assert upstream.requests == []


def test_result_is_indented_json(dispatcher):
    text = asyncio.run(dispatcher.call("list_templates", {}))

    assert text.startswith("[\n  {\n    \"id\": \"drake\"")


# =============================================================================
# search_templates
# =============================================================================

def test_search_templates_matches_id_name_and_keywords(dispatcher, upstream):
    result = call(dispatcher, "search_templates", {"query": "DRAKE"})

    # "drake" by id, "gb" through its keywords; upstream order kept
    assert [t["id"] for t in result] == ["drake", "gb"]
    assert not upstream.requests[0].url.params


def test_search_templates_matches_name_substring(dispatcher):
    result = call(dispatcher, "search_templates", {"query": "everywhere"})

    assert [t["id"] for t in result] == ["buzz"]


def test_search_templates_no_match(dispatcher):
    assert call(dispatcher, "search_templates", {"query": "nothing like this"}) == []


def test_search_templates_requires_query(dispatcher, upstream):
    with pytest.raises(InvalidArgumentsError) as exc_info:
        asyncio.run(dispatcher.call("search_templates", {}))

    assert "query" in str(exc_info.value)
    assert upstream.requests == []


# =============================================================================
# get_template_info
# =============================================================================

def test_get_template_info_returns_upstream_document(dispatcher):
    result = call(dispatcher, "get_template_info", {"template_id": "drake"})

    assert list(result.items()) == list(SAMPLE_TEMPLATES[0].items())


def test_get_template_info_keeps_unmodelled_values(settings, make_service):
    sent = {"id": "x", "_self": "s", "name": "X", "blank": "b", "lines": "2"}
    service = make_service(UpstreamRecorder(lambda request: httpx.Response(200, json=sent)))
    dispatcher = ToolDispatcher(service, settings)

    text = asyncio.run(dispatcher.call("get_template_info", {"template_id": "x"}))

    assert list(json.loads(text).items()) == list(sent.items())


def test_get_template_info_not_found(dispatcher):
    result = call(dispatcher, "get_template_info", {"template_id": "nope"})

    assert result == {"error": "Template 'nope' not found"}


def test_get_template_info_upstream_failure(settings, make_service):
    service = make_service(UpstreamRecorder(lambda request: httpx.Response(502, text="bad gateway")))
    dispatcher = ToolDispatcher(service, settings)

    with pytest.raises(MemegenResponseError):
        asyncio.run(dispatcher.call("get_template_info", {"template_id": "drake"}))

    # the dispatcher keeps serving after a failed call
    assert call(dispatcher, "create_meme", {"template_id": "drake"})["template_id"] == "drake"


# =============================================================================
# dispatch
# =============================================================================

def test_unknown_tool(dispatcher):
    with pytest.raises(UnknownToolError) as exc_info:
        asyncio.run(dispatcher.call("delete_meme", {}))

    assert str(exc_info.value) == "Unknown tool: delete_meme"


def test_non_object_arguments_rejected(dispatcher):
    with pytest.raises(InvalidArgumentsError):
        asyncio.run(dispatcher.call("create_meme", ["drake"]))


def test_tool_registry(dispatcher):
    names = [spec.name for spec in dispatcher.tools]
    assert names == ["list_templates", "create_meme", "search_templates", "get_template_info"]

    schema = dispatcher.get_tool("create_meme").input_schema
    assert schema["required"] == ["template_id"]
    assert "extension" in schema["properties"]
