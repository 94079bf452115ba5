import pytest

from agent_chat.domain.conversation import ConversationHistory
from agent_chat.domain.exceptions import ValidationError
from agent_chat.domain.models import ChatMessage, ContentDelta


def test_models_exist():
    cm = ChatMessage(role="user", content="hi")
    assert cm.role == "user"
    assert cm.id.startswith("m-")
    assert cm.status is None


def test_deltas_append_to_in_flight_message():
    history = ConversationHistory()
    history.add_user("q")
    msg = history.start_assistant()
    assert msg.content == "" and msg.status == "streaming"
    history.apply_delta(ContentDelta(msg.id, "Hel"))
    history.apply_delta(ContentDelta(msg.id, "lo"))
    history.finalize(msg.id)
    assert msg.content == "Hello"
    assert msg.status == "done"
    assert history.in_flight is None
    assert [m.role for m in history] == ["user", "assistant"]


def test_delta_to_finished_message_is_rejected():
    history = ConversationHistory()
    done = history.add_assistant("old")
    with pytest.raises(ValidationError):
        history.apply_delta(ContentDelta(done.id, "x"))
    assert done.content == "old"


def test_fail_keeps_partial_content():
    history = ConversationHistory()
    partial = history.start_assistant()
    history.apply_delta(ContentDelta(partial.id, "part"))
    history.fail(partial.id, "Error contacting endpoint", "STREAM_READ_ERROR")
    assert partial.content == "part"
    assert partial.meta == {"status": "error", "error_code": "STREAM_READ_ERROR"}

    empty = history.start_assistant()
    history.fail(empty.id, "Error contacting endpoint", "API_ERROR")
    assert empty.content == "Error contacting endpoint"


def test_payload_preserves_order():
    history = ConversationHistory()
    history.add_user("a")
    history.add_assistant("b")
    history.add_user("c")
    assert history.as_payload() == [
        {"role": "user", "content": "a"},
        {"role": "assistant", "content": "b"},
        {"role": "user", "content": "c"},
    ]
