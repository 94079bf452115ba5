from agent_chat.decoding.sse_parser import parse_sse_buffer


def test_parse_events_and_skip_done():
    payloads, rest = parse_sse_buffer("data: Hello\n\ndata: World\n\ndata: [DONE]\n\n")
    assert payloads == ["Hello", "World"]
    assert rest == ""


def test_incomplete_event_is_carried_over():
    payloads, rest = parse_sse_buffer("data: a\n\ndata: b")
    assert payloads == ["a"]
    assert rest == "data: b"


def test_non_data_lines_are_ignored():
    buf = ": keep-alive\nevent: message\nid: 7\ndata: x\ndata:   y  \n\n"
    payloads, rest = parse_sse_buffer(buf)
    assert payloads == ["x", "y"]
    assert rest == ""


def test_empty_data_values_are_dropped():
    payloads, _ = parse_sse_buffer("data:\n\ndata:   \n\n")
    assert payloads == []


def test_crlf_framing():
    payloads, rest = parse_sse_buffer("data: a\r\n\r\ndata: b\r\n\r")
    assert payloads == ["a"]
    payloads, rest = parse_sse_buffer(rest + "\n")
    assert payloads == ["b"]
    assert rest == ""
