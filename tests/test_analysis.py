"""Tests for the analysis orchestrator and the OpenAI-backed text service."""
from __future__ import annotations

import threading
from types import SimpleNamespace

import pytest

from aeroanalysis.controller.analysis import ANALYSIS_ERROR_MESSAGE, AnalysisOrchestrator
from aeroanalysis.controller.text_service import SYSTEM_PROMPT, OpenAITextGenerator
from aeroanalysis.errors import ServiceFailure
from aeroanalysis.model.prompts import AnalysisRequest
from aeroanalysis.model.visualization import VisualizationMode

REQUEST = AnalysisRequest(
    object_name="car", wind_speed=10.0, wind_direction=0, visualization=VisualizationMode.FORCES
)


def test_generate_returns_text_and_clears_flag(fake_generator):
    """On success the text is returned and the busy flag drops back."""
    orchestrator = AnalysisOrchestrator(fake_generator)

    text = orchestrator.generate(REQUEST)

    assert text == fake_generator.text
    assert not orchestrator.is_generating
    assert len(fake_generator.prompts) == 1
    assert '"car"' in fake_generator.prompts[0]


@pytest.mark.parametrize("error", [ServiceFailure("boom"), RuntimeError("network"), KeyError("x")])
def test_failures_become_error_message(make_generator, error):
    """Any service failure turns into the fixed error text and releases the flag."""
    orchestrator = AnalysisOrchestrator(make_generator(error=error))

    assert orchestrator.generate(REQUEST) == ANALYSIS_ERROR_MESSAGE
    assert not orchestrator.is_generating


@pytest.mark.parametrize("answer", ["", "   ", None])
def test_blank_answer_is_a_failure(make_generator, answer):
    orchestrator = AnalysisOrchestrator(make_generator(text=answer))
    assert orchestrator.generate(REQUEST) == ANALYSIS_ERROR_MESSAGE


def test_reentrant_call_is_ignored():
    """A second call while one is in flight returns None without calling the service."""
    started = threading.Event()
    release = threading.Event()
    calls = []

    class SlowGenerator:
        def generate(self, prompt):
            calls.append(prompt)
            started.set()
            release.wait(5)
            return "Cd ≈ 0.5"

    orchestrator = AnalysisOrchestrator(SlowGenerator())
    results = []
    worker = threading.Thread(target=lambda: results.append(orchestrator.generate(REQUEST)))
    worker.start()
    assert started.wait(5)

    assert orchestrator.is_generating
    assert orchestrator.generate(REQUEST) is None

    release.set()
    worker.join(5)

    assert results == ["Cd ≈ 0.5"]
    assert len(calls) == 1
    assert not orchestrator.is_generating


# --- OpenAI text service ---

class _FakeCompletions:
    def __init__(self, content):
        self.content = content
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        choices = [] if self.content is None else [SimpleNamespace(message=SimpleNamespace(content=self.content))]
        return SimpleNamespace(choices=choices)


def _client(content):
    completions = _FakeCompletions(content)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions)), completions


def test_openai_generator_sends_system_and_user_messages():
    client, completions = _client("  ## Report\nCd ≈ 0.4  ")
    generator = OpenAITextGenerator(model="gpt-test", client=client)

    assert generator.generate("hello") == "## Report\nCd ≈ 0.4"

    call = completions.calls[0]
    assert call["model"] == "gpt-test"
    assert call["messages"] == [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": "hello"},
    ]


@pytest.mark.parametrize("content", [None, "", "   "])
def test_openai_generator_rejects_empty_answers(content):
    client, _ = _client(content)
    with pytest.raises(ServiceFailure):
        OpenAITextGenerator(client=client).generate("hello")


def test_openai_generator_requires_api_key(monkeypatch):
    """Without a key the failure happens at generation time, not construction."""
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    generator = OpenAITextGenerator()

    with pytest.raises(ServiceFailure):
        generator.generate("hello")


def test_openai_generator_builds_client_from_key():
    from openai import OpenAI

    generator = OpenAITextGenerator(api_key="sk-test")
    assert isinstance(generator._get_client(), OpenAI)
