# ===============================================
# tests/test_pipeline.py
# End-to-end: classify → retrieve → assemble → generate → finalize
# ===============================================

import pytest

from oncoguide.generate.generator import AnswerGenerator, GenerationError
from oncoguide.generate.safety import EMERGENCY_BANNER
from oncoguide.pipeline import ChatPipeline, InvalidQueryError, build_pipeline
from oncoguide.search.retriever import HybridRetriever
from oncoguide.search.types import SearchHit
from oncoguide.settings import Settings
from oncoguide.stores import InMemoryHistoryStore, InMemoryProfileStore, conversation_key


def make_pipeline(backend, *providers, profiles=None, history=None):
    return ChatPipeline(
        retriever=HybridRetriever(backend),
        generator=AnswerGenerator(list(providers)),
        profiles=profiles or InMemoryProfileStore(),
        history=history or InMemoryHistoryStore(),
    )


def test_treatment_question_on_empty_corpus(fake_backend_factory, fake_client_factory):
    client = fake_client_factory("FOLFOX and CAPOX are the usual options. Talk to your")
    pipeline = make_pipeline(fake_backend_factory(), client)

    result = pipeline.answer("What chemotherapy drugs treat stage 3 colon cancer?", response_length="brief")

    assert result.query_type == "treatment"
    assert result.retrieved_count == 0
    assert result.is_urgent is False
    assert result.patient_context_used is False
    assert result.api_used == "primary"
    assert result.answer == "FOLFOX and CAPOX are the usual options."

    messages, params = client.calls[0]
    assert params.max_tokens == 250
    assert "No directly relevant medical sources" in messages[1].content


def test_detailed_requests_ten_chunks(fake_backend_factory, fake_client_factory):
    backend = fake_backend_factory()
    make_pipeline(backend, fake_client_factory("Ok.")).answer("hello", response_length="detailed")
    assert backend.calls == [("hello", 10)]


def test_unknown_length_normalizes(fake_backend_factory, fake_client_factory):
    backend = fake_backend_factory()
    client = fake_client_factory("Ok.")
    make_pipeline(backend, client).answer("hello", response_length="huge")
    assert backend.calls == [("hello", 8)]
    assert client.calls[0][1].max_tokens == 500


def test_urgent_message_gets_banner(fake_backend_factory, fake_client_factory):
    pipeline = make_pipeline(fake_backend_factory(), fake_client_factory("Call your team now."))
    result = pipeline.answer("I have chest pain after my infusion")
    assert result.is_urgent is True
    assert result.answer.startswith(EMERGENCY_BANNER)
    assert result.answer.endswith("\n\n---\n\nCall your team now.")


def test_profile_and_history_feed_the_prompt(fake_backend_factory, fake_client_factory):
    profiles = InMemoryProfileStore({"u1": {"cancer_type": "Colon", "cancer_stage": "III"}})
    history = InMemoryHistoryStore()
    conv = conversation_key("u1", "s1")
    history.append(conv, "user", "Is FOLFOX hard?")
    history.append(conv, "assistant", "It can be tiring.")
    backend = fake_backend_factory({"What next?": [SearchHit("c1", "Adjuvant therapy lasts 3-6 months.", 1.0)]})
    client = fake_client_factory("Next comes follow-up.")

    result = make_pipeline(backend, client, profiles=profiles, history=history).answer(
        "What next?", session_id="s1", user_id="u1"
    )

    prompt = client.calls[0][0][1].content
    assert result.patient_context_used is True
    assert result.retrieved_count == 1
    assert "• Stage: III" in prompt
    assert "Q1: Is FOLFOX hard?\nA1: It can be tiring." in prompt
    assert "--- Source 1 ---\nAdjuvant therapy lasts 3-6 months." in prompt

    stored = history.get_recent_history(conv, 12)
    assert [m.content for m in stored[:2]] == ["Next comes follow-up.", "What next?"]


def test_empty_profile_counts_as_used_but_renders_nothing(fake_backend_factory, fake_client_factory):
    client = fake_client_factory("Ok.")
    profiles = InMemoryProfileStore({"u1": {}})
    result = make_pipeline(fake_backend_factory(), client, profiles=profiles).answer("hi", user_id="u1")
    assert result.patient_context_used is True
    assert "PATIENT PROFILE" not in client.calls[0][0][1].content


def test_history_window_is_bounded(fake_backend_factory, fake_client_factory):
    history = InMemoryHistoryStore()
    conv = conversation_key("anonymous", "default")
    for i in range(20):
        history.append(conv, "user" if i % 2 == 0 else "assistant", f"turn {i}")
    client = fake_client_factory("Ok.")
    make_pipeline(fake_backend_factory(), client, history=history).answer("hi")
    prompt = client.calls[0][0][1].content
    assert "turn 7" not in prompt
    assert "Q1: turn 8" in prompt
    assert "A6: turn 19" in prompt


@pytest.mark.parametrize("message", [None, "", "   "])
def test_empty_message_rejected(fake_backend_factory, fake_client_factory, message):
    backend = fake_backend_factory()
    client = fake_client_factory("Ok.")
    with pytest.raises(InvalidQueryError):
        make_pipeline(backend, client).answer(message)
    assert backend.calls == []
    assert client.calls == []


def test_generation_failure_persists_nothing(fake_backend_factory, fake_client_factory):
    history = InMemoryHistoryStore()
    pipeline = make_pipeline(
        fake_backend_factory(),
        fake_client_factory(error=RuntimeError("primary down")),
        fake_client_factory(error=RuntimeError("secondary down")),
        history=history,
    )
    with pytest.raises(GenerationError):
        pipeline.answer("hello")
    assert history.get_recent_history(conversation_key("anonymous", "default"), 12) == []


def test_build_pipeline_defaults_to_echo(tmp_path):
    settings = Settings(DB_PATH=(tmp_path / "db" / "corpus.db").as_posix(), USE_OLLAMA=False,
                        TOGETHER_API_KEY=None, GROQ_API_KEY=None)
    pipeline = build_pipeline(settings)
    result = pipeline.answer("What does a CEA test measure?")
    assert result.api_used == "primary"
    assert result.query_type == "diagnosis"
    assert result.answer.startswith("[ECHO RESPONSE]")
    pipeline.retriever.backend.close()
