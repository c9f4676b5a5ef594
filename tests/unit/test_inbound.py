from __future__ import annotations

import pytest

from chat_relay.session.inbound import parse_inbound


@pytest.mark.parametrize("raw", ["_STOP_", "__STOP__", "  __STOP__\n"])
def test_stop_sentinels(raw: str) -> None:
    assert parse_inbound(raw).is_stop


@pytest.mark.parametrize("raw", ["STOP", "_STOP", "please _STOP_", "stop"])
def test_text_that_merely_resembles_a_stop(raw: str) -> None:
    message = parse_inbound(raw)
    assert not message.is_stop
    assert message.text == raw.strip()


@pytest.mark.parametrize("raw", ["", "   ", "\n\t", None])
def test_blank_text_is_empty(raw: str | None) -> None:
    assert parse_inbound(raw).is_empty


def test_user_text_is_trimmed() -> None:
    message = parse_inbound("  hello there \n")
    assert message.text == "hello there"
    assert not message.is_empty
