from agent_chat.decoding.non_streaming import NO_REPLY_TEXT, decode_non_streaming


def test_json_reply_field():
    assert decode_non_streaming("application/json", '{"reply": "hi"}', "reply") == "hi"


def test_missing_field_uses_placeholder():
    assert decode_non_streaming("application/json", "{}", "reply") == NO_REPLY_TEXT == "No reply"


def test_custom_key_and_non_string_value():
    assert decode_non_streaming("application/json; charset=utf-8", '{"answer": "ok"}', "answer") == "ok"
    assert decode_non_streaming("application/json", '{"reply": 42}', "reply") == "No reply"


def test_invalid_json_is_treated_as_empty():
    assert decode_non_streaming("application/json", "{oops", "reply") == "No reply"
    assert decode_non_streaming("application/json", "[1, 2]", "reply") == "No reply"


def test_empty_key_falls_back_to_reply():
    assert decode_non_streaming("application/json", '{"reply": "x"}', "") == "x"


def test_plain_text_is_used_verbatim():
    assert decode_non_streaming("text/plain", "  raw body\n", "reply") == "  raw body\n"
    assert decode_non_streaming(None, "", "reply") == "No reply"
