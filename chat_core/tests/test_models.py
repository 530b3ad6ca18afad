import pytest

from chat_core.domain.conversation import Conversation
from chat_core.domain.exceptions import ValidationError
from chat_core.domain.models import DisplayEvent, FunctionCall, Message


def test_message_constructors():
    call = FunctionCall(name="get_current_weather", arguments='{"location": "Boston, MA"}')
    req = Message.function_request(call)
    assert req.role == "assistant"
    assert req.content == ""
    assert req.function_call == call

    res = Message.function_result("get_current_weather", "{}")
    assert res.role == "function"
    assert res.name == "get_current_weather"


def test_function_message_requires_name_and_content():
    with pytest.raises(ValidationError):
        Message(role="function", content="x")
    with pytest.raises(ValidationError):
        Message(role="function", name="f")


def test_message_is_immutable():
    msg = Message.user("hi")
    with pytest.raises(AttributeError):
        msg.content = "changed"


def test_conversation_append_snapshot_and_subscribe():
    conv = Conversation()
    seen = []
    unsubscribe = conv.subscribe(seen.append)
    conv.append(Message.user("one"))
    snap = conv.snapshot()
    conv.append(Message.assistant("two"))
    unsubscribe()
    conv.append(Message.user("three"))

    assert len(snap) == 1
    assert [m.content for m in conv] == ["one", "two", "three"]
    assert [m.content for m in seen] == ["one", "two"]


def test_display_event_defaults():
    a = DisplayEvent(text="hi", origin="user")
    b = DisplayEvent(text="hi", origin="user")
    assert a.id != b.id
    assert a.timestamp.tzinfo is not None
