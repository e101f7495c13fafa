"""Tests for provider selection and message assembly."""

import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from src.llm import client, invoker
from src.llm.client import ProviderUnavailableError, get_llm
from src.llm.invoker import LLMGenerator, build_messages
from src.schemas.conversation import ChatTurn


@pytest.fixture(autouse=True)
def fresh_client_cache():
    get_llm.cache_clear()
    yield
    get_llm.cache_clear()


@pytest.fixture
def no_providers(monkeypatch):
    monkeypatch.setattr(client, "COMPUTE_LLM_URL", "")
    monkeypatch.setattr(client, "GROQ_API_KEY", "")


def test_compute_preferred_when_configured(no_providers, monkeypatch):
    monkeypatch.setattr(client, "COMPUTE_LLM_URL", "http://compute.local:8080/")
    monkeypatch.setattr(client, "GROQ_API_KEY", "gsk_test")

    llm = get_llm()
    assert llm.model_name == client.COMPUTE_LLM_MODEL
    assert llm.openai_api_base == "http://compute.local:8080/v1"


def test_falls_back_to_groq(no_providers, monkeypatch):
    monkeypatch.setattr(client, "GROQ_API_KEY", "gsk_test")

    llm = get_llm(temperature=0.2)
    assert llm.model_name == client.GROQ_MODEL
    assert llm.temperature == 0.2


def test_construction_failure_falls_through(no_providers, monkeypatch):
    def broken():
        raise RuntimeError("bad credentials file")

    monkeypatch.setattr(client, "GROQ_API_KEY", "gsk_test")
    monkeypatch.setattr(client, "PROVIDER_ORDER", (broken, client.groq_provider))

    assert get_llm().model_name == client.GROQ_MODEL


def test_provider_chain_walked_once(no_providers, monkeypatch):
    attempts = []

    def missing():
        attempts.append("missing")
        raise ProviderUnavailableError("not configured")

    def counted_groq():
        attempts.append("groq")
        return client.groq_provider()

    monkeypatch.setattr(client, "GROQ_API_KEY", "gsk_test")
    monkeypatch.setattr(client, "PROVIDER_ORDER", (missing, counted_groq))

    first = get_llm()
    second = get_llm()
    assert first is second
    assert attempts == ["missing", "groq"]


def test_no_provider_available(no_providers):
    with pytest.raises(ProviderUnavailableError) as exc:
        get_llm()
    assert "compute_provider" in str(exc.value)
    assert "groq_provider" in str(exc.value)


def test_build_messages_order():
    history = [
        ChatTurn(role="human", content="hi"),
        ChatTurn(role="assistant", content="hello, how can I help?"),
    ]
    messages = build_messages("You are Trakt.", history, "make an escrow")

    assert [type(m) for m in messages] == [SystemMessage, HumanMessage, AIMessage, HumanMessage]
    assert messages[0].content == "You are Trakt."
    assert messages[-1].content == "make an escrow"


class _FakeChat:
    def __init__(self, content):
        self.content = content
        self.received = None

    async def ainvoke(self, messages):
        self.received = messages
        return AIMessage(content=self.content)


@pytest.mark.asyncio
async def test_generator_returns_stripped_text(monkeypatch):
    chat = _FakeChat("  escrow_Node\n")
    temperatures = []

    def fake_get_llm(temperature=None):
        temperatures.append(temperature)
        return chat

    monkeypatch.setattr(invoker, "get_llm", fake_get_llm)

    reply = await LLMGenerator(temperature=0.0).generate("classify", [], "sell my NFT")
    assert reply == "escrow_Node"
    assert temperatures == [0.0]
    assert len(chat.received) == 2
