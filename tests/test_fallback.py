import pytest

from conftest import FakeClient
from app.modules.generation.errors import (
    AllCandidatesExhausted,
    ConfigurationError,
    FailureKind,
    ProviderError,
)
from app.modules.generation.fallback import Candidate, build_candidates, try_in_order


def test_build_candidates_configured_first_then_defaults_deduped():
    candidates = build_candidates("huggingface", " org/custom ", ["org/a", "org/custom", "", "org/b"])
    assert candidates == [
        Candidate("huggingface", "org/custom"),
        Candidate("huggingface", "org/a"),
        Candidate("huggingface", "org/b"),
    ]


def test_build_candidates_without_configured_model():
    assert build_candidates("huggingface", None, ["m"]) == [Candidate("huggingface", "m")]
    assert str(Candidate("gemini", "gemini-1.5-flash")) == "gemini:gemini-1.5-flash"


async def test_skips_not_found_and_reports_used_model():
    hf = FakeClient("huggingface", {"B": [{"generated_text": "from B"}]})
    result = await try_in_order(
        {"huggingface": hf},
        [Candidate("huggingface", "A"), Candidate("huggingface", "B")],
        {"inputs": "x"},
    )
    assert result.response == [{"generated_text": "from B"}]
    assert result.used_model == Candidate("huggingface", "B")
    assert len(result.failures) == 1
    assert result.failures[0].kind is FailureKind.NOT_FOUND
    assert hf.models == ["A", "B"]


async def test_all_failing_raises_with_last_error():
    rate_limited = ProviderError(provider="huggingface", model="B", status=429, status_text="Too Many Requests")
    hf = FakeClient("huggingface", {"B": rate_limited})
    with pytest.raises(AllCandidatesExhausted) as info:
        await try_in_order(
            {"huggingface": hf},
            [Candidate("huggingface", "A"), Candidate("huggingface", "B")],
            {"inputs": "x"},
        )
    assert info.value.last_error is rate_limited
    assert info.value.last_error.kind is FailureKind.RATE_LIMITED
    assert info.value.attempted == ["huggingface:A", "huggingface:B"]


async def test_missing_credential_disables_provider_family():
    hf = FakeClient("huggingface", {"A": ConfigurationError("huggingface", "HF_API_KEY not configured")})
    gemini = FakeClient("gemini", {"g": {"candidates": [{"content": "ok"}]}})
    result = await try_in_order(
        {"huggingface": hf, "gemini": gemini},
        [Candidate("huggingface", "A"), Candidate("huggingface", "B"), Candidate("gemini", "g")],
        {"inputs": "x"},
    )
    assert hf.models == ["A"]
    assert result.used_model == Candidate("gemini", "g")
    assert isinstance(result.failures[0], ConfigurationError)


async def test_candidate_without_client_is_skipped():
    hf = FakeClient("huggingface", {"A": "fine"})
    result = await try_in_order(
        {"huggingface": hf},
        [Candidate("gemini", "g"), Candidate("huggingface", "A")],
        {"inputs": "x"},
    )
    assert result.response == "fine"


async def test_payload_can_depend_on_candidate():
    hf = FakeClient("huggingface", {"B": "done"})
    await try_in_order(
        {"huggingface": hf},
        [Candidate("huggingface", "A"), Candidate("huggingface", "B")],
        lambda c: {"inputs": f"for {c.model}"},
    )
    assert [p["inputs"] for _, p in hf.calls] == ["for A", "for B"]


async def test_empty_candidate_list_is_exhausted():
    with pytest.raises(AllCandidatesExhausted) as info:
        await try_in_order({}, [], {"inputs": "x"})
    assert info.value.last_error is None
