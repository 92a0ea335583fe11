import json

import pytest

from maruou.errors import ContentParseError
from maruou.services.recovery import parse_quiz_text, strip_fences


def test_plain_array(sushi_text):
    assert parse_quiz_text(sushi_text) == json.loads(sushi_text)


@pytest.mark.parametrize(
    "wrap",
    [
        "```json\n{}\n```",
        "```JSON\n{}\n```",
        "```\n{}\n```",
        "```json {}```",
        "  ```json\n{}\n```  \n",
    ],
)
def test_fenced_array_parses_like_plain(wrap, sushi_text):
    assert parse_quiz_text(wrap.replace("{}", sushi_text)) == parse_quiz_text(sushi_text)


def test_strip_fences_leaves_unfenced_text_alone():
    assert strip_fences('[{"a": 1}]') == '[{"a": 1}]'


def test_non_array_json_is_retried_then_returned():
    # a bare object is not accepted on the first pass; the stripped retry
    # hands it on and the validator rejects it
    assert parse_quiz_text('{"quiz": []}') == {"quiz": []}


@pytest.mark.parametrize(
    "text",
    [
        "Here is your quiz: [1, 2, 3]",
        "```json\n[{\"question\": \n```",
        "",
    ],
)
def test_unrecoverable_text_keeps_raw(text):
    with pytest.raises(ContentParseError) as ei:
        parse_quiz_text(text)
    assert ei.value.payload == text
