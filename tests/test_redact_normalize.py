import pytest

from app.modules.generation.normalize import ResponseShape, classify, normalize
from app.modules.generation.redact import redact


def test_redact_replaces_links_and_emails():
    text = "See https://example.com/page?x=1 or www.example.org and write to jo.doe@mail.example.com now"
    assert redact(text) == "See [LINK] or [LINK] and write to [EMAIL] now"


@pytest.mark.parametrize(
    "text",
    [
        "Contact me at me@site.io, details at http://site.io/about",
        "a@www.x.com",
        "x@y.comm@z.co",
        "www.a@b.com and https://x.y/?m=u@v.com",
        "mail me:a@b.co,www.c.org/https://d.e",
        "a@b.cc.http://x [LINK] [EMAIL]",
        "no links here",
    ],
)
def test_redact_is_idempotent(text):
    once = redact(text)
    assert redact(once) == once


def test_redact_leaves_plain_text_alone():
    assert redact("The mitochondria is the powerhouse of the cell.") == (
        "The mitochondria is the powerhouse of the cell."
    )
    assert redact("") == ""


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, ""),
        ("", ""),
        ("plain output", "plain output"),
        ({"generated_text": "gen"}, "gen"),
        ({"summary_text": "sum"}, "sum"),
        ([{"summary_text": "first"}, {"summary_text": "second"}], "first"),
        ([{"generated_text": "g"}], "g"),
        (["a", "b"], "a"),
        ([], "[]"),
        ({"error": "loading"}, '{"error":"loading"}'),
        ([{"label": "x", "score": 0.5}], "x"),
        ([3, 4], "3"),
    ],
)
def test_normalize_shapes(raw, expected):
    assert normalize(raw) == expected


def test_normalize_unknown_is_compact_json():
    assert normalize({"a": [1, 2], "b": "é"}) == '{"a":[1,2],"b":"é"}'


def test_classify_tags_each_shape():
    assert classify(None).shape is ResponseShape.EMPTY
    assert classify("x").shape is ResponseShape.TEXT
    assert classify({"generated_text": "x"}).shape is ResponseShape.OBJECT_WITH_TEXT
    assert classify([{"generated_text": "x"}]).shape is ResponseShape.ARRAY
    assert classify({"other": 1}).shape is ResponseShape.UNKNOWN
    assert classify(42).shape is ResponseShape.UNKNOWN


@pytest.mark.parametrize(
    "raw, expected",
    [
        ([0, 1], "[0,1]"),
        ([False, True], "[false,true]"),
        (["", "x"], '["","x"]'),
        ([{}], "{}"),
        ([[1.0, 2.5]], "[1,2.5]"),
        ({"score": 1.0, "ids": [2.0]}, '{"score":1,"ids":[2]}'),
    ],
)
def test_normalize_follows_json_stringify(raw, expected):
    assert normalize(raw) == expected
