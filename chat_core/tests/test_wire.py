from chat_core.domain.models import FunctionCall, Message
from chat_core.providers.wire import message_from_payload, message_to_payload, reply_from_response


def test_conversation_round_trip():
    call = FunctionCall(name="get_current_weather", arguments='{"location":"Boston, MA"}')
    conversation = [
        Message.user("What is the weather in Boston?"),
        Message.function_request(call),
        Message.function_result("get_current_weather", '{"temperature":"72"}'),
        Message(role="assistant", content=None, function_call=call),
        Message.assistant("It's 72°F and sunny in Boston."),
    ]
    payloads = [message_to_payload(m) for m in conversation]
    assert payloads[1] == {
        "role": "assistant",
        "content": "",
        "function_call": {"name": "get_current_weather", "arguments": '{"location":"Boston, MA"}'},
    }
    assert payloads[2]["name"] == "get_current_weather"
    assert payloads[3]["content"] is None
    assert [message_from_payload(p) for p in payloads] == conversation


def test_reply_prefers_function_call_over_text():
    data = {
        "id": "r1",
        "choices": [
            {
                "index": 0,
                "message": {
                    "role": "assistant",
                    "content": "Let me check.",
                    "function_call": {"name": "get_current_weather", "arguments": "{}"},
                },
                "finish_reason": "function_call",
            }
        ],
    }
    reply = reply_from_response(data)
    assert reply.text is None
    assert reply.function_call.name == "get_current_weather"


def test_reply_ignores_unknown_fields():
    data = {
        "id": "r2",
        "object": "chat.completion",
        "usage": {"total_tokens": 3},
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": "hi", "refusal": None},
                "finish_reason": "stop",
                "logprobs": None,
            }
        ],
    }
    assert reply_from_response(data).text == "hi"
