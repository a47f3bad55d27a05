import pytest

from gemini_core.domain.exceptions import ApiError, NetworkError, NoCandidatesError
from gemini_core.domain.models import (
    Candidate,
    Content,
    GenerateContentResponse,
    Part,
)
from gemini_core.prompts import load_system_prompt
from gemini_core.session.conversation import SUMMARIZE_REQUEST, Conversation, ConversationConfig


def _reply(text, model_version="v1"):
    return GenerateContentResponse(
        candidates=[Candidate(content=Content(parts=[Part(text=text)], role="model"))],
        model_version=model_version,
    )


class FakeProvider:
    """按顺序返回预设响应（或抛出预设异常），并记录收到的请求。"""

    name = "fake"

    def __init__(self, *responses):
        self._responses = list(responses)
        self.calls = []

    def generate_content(self, endpoint, req):
        self.calls.append((endpoint, req))
        item = self._responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


def _turns(conv):
    return [(c.role, c.text) for c in conv.history]


def test_endpoint_default():
    conv = Conversation("K")
    assert conv.endpoint() == (
        "https://generativelanguage.googleapis.com/v1beta/models/gemini-1.5-flash:generateContent?key=K"
    )


def test_endpoint_custom_config():
    cfg = ConversationConfig(base_url="http://localhost:8080/v1beta/", model="gemini-1.5-pro")
    conv = Conversation("K", config=cfg, provider_client=FakeProvider())
    assert conv.endpoint() == "http://localhost:8080/v1beta/models/gemini-1.5-pro:generateContent?key=K"
    assert conv.model == "gemini-1.5-pro"


def test_new_conversation_is_empty():
    conv = Conversation("K", provider_client=FakeProvider())
    assert conv.history == []
    assert conv.system_instruction is None
    assert conv.api_key == "K"
    assert conv.model == "gemini-1.5-flash"


def test_talk_hello():
    provider = FakeProvider(_reply("hi"))
    conv = Conversation("K", provider_client=provider)
    res = conv.talk("hello")
    assert res.get_text() == "hi"
    assert res.model_version == "v1"
    assert conv.history == [
        Content(parts=[Part(text="hello")], role="user"),
        Content(parts=[Part(text="hi")], role="model"),
    ]
    endpoint, req = provider.calls[0]
    assert endpoint == conv.endpoint()
    assert req.model == "gemini-1.5-flash"
    assert req.contents == [Content.from_text("user", "hello")]
    assert req.system_instruction is None


def test_talk_history_grows_in_pairs():
    provider = FakeProvider(*[_reply(f"r{i}") for i in range(3)])
    conv = Conversation("K", provider_client=provider)
    for i in range(3):
        conv.talk(f"q{i}")
        assert len(conv.history) == 2 * (i + 1)
    assert _turns(conv) == [
        ("user", "q0"), ("model", "r0"),
        ("user", "q1"), ("model", "r1"),
        ("user", "q2"), ("model", "r2"),
    ]
    # 每次请求都携带当时的完整历史
    assert [len(req.contents) for _, req in provider.calls] == [1, 3, 5]


def test_request_contents_are_snapshots():
    provider = FakeProvider(_reply("a"), _reply("b"))
    conv = Conversation("K", provider_client=provider)
    conv.talk("one")
    conv.talk("two")
    first_req = provider.calls[0][1]
    assert len(first_req.contents) == 1
    first_req.contents[0].parts[0].text = "changed"
    assert conv.history[0].text == "one"


def test_history_property_is_a_copy():
    conv = Conversation("K", provider_client=FakeProvider(_reply("a")))
    conv.talk("one")
    snapshot = conv.history
    snapshot.clear()
    assert len(conv.history) == 2


def test_set_system_instruction_overwrites():
    provider = FakeProvider(_reply("ok"))
    conv = Conversation("K", provider_client=provider)
    conv.set_system_instruction("first")
    conv.set_system_instruction("second")
    assert conv.system_instruction == Content.from_text("system", "second")
    conv.talk("hello")
    req = provider.calls[0][1]
    assert req.system_instruction == Content(parts=[Part(text="second")], role="system")
    # 系统指令不进入历史
    assert [c.role for c in conv.history] == ["user", "model"]


@pytest.mark.parametrize(
    "error",
    [
        NetworkError(code="NETWORK_ERROR", message="down"),
        ApiError(code="API_ERROR", message="bad key", http_status=400),
    ],
)
def test_talk_request_error_rolls_back(error):
    conv = Conversation("K", provider_client=FakeProvider(_reply("a"), error))
    conv.talk("one")
    with pytest.raises(type(error)):
        conv.talk("two")
    assert _turns(conv) == [("user", "one"), ("model", "a")]


def test_talk_no_candidates_rolls_back():
    empty = GenerateContentResponse(candidates=[], model_version="v1")
    conv = Conversation("K", provider_client=FakeProvider(empty))
    with pytest.raises(NoCandidatesError):
        conv.talk("hello")
    assert conv.history == []


def test_summarize_replaces_history():
    provider = FakeProvider(_reply("a"), _reply("b"), _reply("the summary"))
    conv = Conversation("K", provider_client=provider)
    conv.talk("one")
    conv.talk("two")
    conv.summarize()
    assert conv.history == [Content(parts=[Part(text="the summary")], role="model")]
    assert conv.api_key == "K"
    assert conv.model == "gemini-1.5-flash"

    endpoint, req = provider.calls[-1]
    assert endpoint == conv.endpoint()
    assert [(c.role, c.text) for c in req.contents] == [
        ("user", "one"), ("model", "a"),
        ("user", "two"), ("model", "b"),
        ("user", SUMMARIZE_REQUEST),
    ]
    assert req.system_instruction == Content.from_text("system", load_system_prompt("summarize"))


def test_summarize_does_not_touch_outer_system_instruction():
    provider = FakeProvider(_reply("a"), _reply("summary"), _reply("after"))
    conv = Conversation("K", provider_client=provider)
    conv.set_system_instruction("be nice")
    conv.talk("one")
    conv.summarize()
    assert conv.system_instruction == Content.from_text("system", "be nice")
    conv.talk("next")
    assert provider.calls[-1][1].system_instruction.text == "be nice"
    assert _turns(conv) == [("model", "summary"), ("user", "next"), ("model", "after")]


def test_summarize_failure_keeps_history():
    error = NetworkError(code="NETWORK_ERROR", message="down")
    conv = Conversation("K", provider_client=FakeProvider(_reply("a"), error))
    conv.talk("one")
    with pytest.raises(NetworkError):
        conv.summarize()
    assert _turns(conv) == [("user", "one"), ("model", "a")]


def test_summarize_no_candidates_keeps_history():
    empty = GenerateContentResponse(candidates=[])
    conv = Conversation("K", provider_client=FakeProvider(_reply("a"), empty))
    conv.talk("one")
    with pytest.raises(NoCandidatesError):
        conv.summarize()
    assert len(conv.history) == 2


def test_summarize_empty_history_still_requests():
    provider = FakeProvider(_reply("S"))
    conv = Conversation("K", provider_client=provider)
    conv.summarize()
    assert len(provider.calls) == 1
    req = provider.calls[0][1]
    assert [(c.role, c.text) for c in req.contents] == [("user", SUMMARIZE_REQUEST)]
    assert _turns(conv) == [("model", "S")]
