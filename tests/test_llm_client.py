import pytest
import requests

from llm.base import LLMClientError
from llm.client import GeminiClient, LLMClient, _RetryingHTTPClient, create_text_generator
from utils.config import Config, GeminiConfig, LLMConfig


class FakeResponse:
    def __init__(self, payload=None, status_code=200, bad_json=False):
        self.payload = payload
        self.status_code = status_code
        self.bad_json = bad_json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"HTTP {self.status_code}", response=self)

    def json(self):
        if self.bad_json:
            raise ValueError("Expecting value")
        return self.payload


class FakeSession:
    """Returns (or raises) queued outcomes and records each call."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = []
        self.closed = False

    def post(self, url, json=None, params=None, timeout=None):
        self.calls.append({"url": url, "json": json, "params": params, "timeout": timeout})
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def close(self):
        self.closed = True


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    monkeypatch.setattr("llm.client.time.sleep", lambda seconds: None)


def llama(session, retries=2):
    return LLMClient(LLMConfig(base_url="http://llm:9000", timeout=5, max_retries=retries), session=session)


def gemini(session, retries=1):
    config = GeminiConfig(api_key="k", model="gemini-test", api_base="https://g.example/v1beta")
    return GeminiClient(config, timeout=5, max_retries=retries, session=session)


class TestLLMClient:

    def test_generate_posts_completion_payload(self):
        session = FakeSession(FakeResponse({"content": "SCORE: 5", "tokens_predicted": 3}))
        assert llama(session).generate("Evaluate this") == "SCORE: 5"

        call = session.calls[0]
        assert call["url"] == "http://llm:9000/completion"
        assert call["json"]["prompt"] == "Evaluate this"
        assert call["json"]["n_predict"] == 1024
        assert call["timeout"] == 5

    def test_retries_transport_errors(self):
        session = FakeSession(
            requests.exceptions.ConnectionError("refused"),
            requests.exceptions.Timeout("slow"),
            FakeResponse({"content": "ok"}),
        )
        assert llama(session, retries=2).generate("p") == "ok"
        assert len(session.calls) == 3

    def test_gives_up_after_retries(self):
        session = FakeSession(*[requests.exceptions.ConnectionError("refused")] * 3)
        with pytest.raises(LLMClientError, match="after 3 attempts"):
            llama(session, retries=2).generate("p")

    def test_server_errors_are_retried_client_errors_are_not(self):
        session = FakeSession(FakeResponse(status_code=503), FakeResponse({"content": "ok"}))
        assert llama(session).generate("p") == "ok"

        session = FakeSession(FakeResponse(status_code=400))
        with pytest.raises(LLMClientError, match="HTTP 400"):
            llama(session).generate("p")
        assert len(session.calls) == 1

    def test_empty_completion_is_an_error(self):
        session = FakeSession(FakeResponse({"content": "   "}))
        with pytest.raises(LLMClientError):
            llama(session).generate("p")

    def test_invalid_json_is_an_error(self):
        with pytest.raises(LLMClientError, match="invalid JSON"):
            llama(FakeSession(FakeResponse(bad_json=True))).generate("p")

    def test_health_check(self):
        session = FakeSession(FakeResponse({"content": "Hi"}))
        assert llama(session).health_check()
        assert session.calls[0]["json"]["n_predict"] == 5

        session = FakeSession(*[requests.exceptions.ConnectionError("refused")] * 3)
        assert not llama(session, retries=2).health_check()

    def test_backend_must_implement_complete(self):
        class NoComplete(_RetryingHTTPClient):
            pass

        with pytest.raises(TypeError):
            NoComplete(timeout=5, max_retries=0, session=FakeSession())

    def test_close_closes_session(self):
        session = FakeSession()
        llama(session).close()
        assert session.closed


class TestGeminiClient:

    def test_generate_content_request(self):
        payload = {"candidates": [{"content": {"parts": [{"text": "1. A"}, {"text": "\n2. B"}]}}]}
        session = FakeSession(FakeResponse(payload))
        assert gemini(session).generate("Generate") == "1. A\n2. B"

        call = session.calls[0]
        assert call["url"] == "https://g.example/v1beta/models/gemini-test:generateContent"
        assert call["params"] == {"key": "k"}
        assert call["json"]["contents"][0]["parts"][0]["text"] == "Generate"
        assert call["json"]["generationConfig"]["maxOutputTokens"] == 512
        assert call["json"]["generationConfig"]["topK"] == 40

    def test_blocked_prompt(self):
        session = FakeSession(FakeResponse({"promptFeedback": {"blockReason": "SAFETY"}}))
        with pytest.raises(LLMClientError, match="SAFETY"):
            gemini(session).generate("p")

    def test_no_candidates_is_empty(self):
        with pytest.raises(LLMClientError):
            gemini(FakeSession(FakeResponse({"candidates": []}))).generate("p")

    def test_requires_api_key(self):
        with pytest.raises(ValueError):
            GeminiClient(GeminiConfig(api_key=None))


class TestFactory:

    def test_default_is_llamacpp(self, monkeypatch):
        monkeypatch.delenv("LLM_PROVIDER", raising=False)
        assert isinstance(create_text_generator(Config()), LLMClient)

    def test_gemini_provider(self, monkeypatch):
        monkeypatch.setenv("LLM_PROVIDER", "gemini")
        monkeypatch.setenv("GEMINI_API_KEY", "secret")
        assert isinstance(create_text_generator(Config()), GeminiClient)

    def test_unknown_provider(self, monkeypatch):
        monkeypatch.setenv("LLM_PROVIDER", "carrier-pigeon")
        with pytest.raises(ValueError):
            create_text_generator(Config())
