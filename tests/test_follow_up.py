import pytest
from conftest import FakeLLM, make_spot

from parking_backend.schemas.ai import ConversationContext
from parking_backend.services.follow_up import (
    APOLOGY_ANSWER,
    NO_RESULTS_ANSWER,
    answer_follow_up,
    filter_for_follow_up,
)
from parking_backend.services.responses import (
    NO_RESULTS_MESSAGE,
    fallback_response,
    generate_response,
)


@pytest.fixture
def spots():
    return [
        make_spot("a", hourly=4.0, availability=30, score=3.8, distance=400),
        make_spot("b", hourly=0.0, availability=70, score=4.9, distance=900),
        make_spot("c", hourly=2.5, availability=10, score=4.1, distance=100, covered=True),
        make_spot("d", hourly=6.0, availability=95, score=4.6, distance=50, ev_charging=True),
        make_spot("e", hourly=3.5, availability=55, score=3.2, distance=700, covered=True),
        make_spot("f", hourly=1.5, availability=40, score=4.4, distance=300),
        make_spot("g", hourly=5.5, availability=80, score=4.0, distance=200),
    ]


def ids(spots):
    return [s.id for s in spots]


def test_safest_selects_top_five_by_safety(spots):
    assert ids(filter_for_follow_up("which is safest?", spots)) == ["b", "d", "f", "c", "g"]


def test_keyword_rules(spots):
    assert ids(filter_for_follow_up("which has the lowest price", spots)) == ["b", "f", "c", "e", "a"]
    assert ids(filter_for_follow_up("which is most available", spots)) == ["d", "g", "b", "e", "f"]
    assert ids(filter_for_follow_up("what's closest to me", spots)) == ["d", "c", "g", "f", "a"]
    assert ids(filter_for_follow_up("any covered ones?", spots)) == ["c", "e"]
    assert ids(filter_for_follow_up("does any have EV chargers", spots)) == ["d"]
    assert ids(filter_for_follow_up("are any of them free", spots)) == ["b"]


def test_first_matching_rule_wins(spots):
    # "cheapest" outranks "covered"
    assert ids(filter_for_follow_up("cheapest covered one?", spots)) == ["b", "f", "c", "e", "a"]


def test_no_rule_returns_everything_unchanged(spots):
    # "every" must not trigger the EV rule
    assert ids(filter_for_follow_up("tell me about every option", spots)) == ids(spots)


async def test_empty_results_need_new_search_without_model_call():
    llm = FakeLLM("should not be used")

    answer = await answer_follow_up("which is safest?", [], None, llm)

    assert answer.answer == NO_RESULTS_ANSWER
    assert answer.needs_new_search is True
    assert answer.results == []
    assert llm.calls == []


async def test_model_answer_with_digest_of_first_ten(spots):
    many = spots + [make_spot(f"x{i}") for i in range(8)]
    context = ConversationContext(session_id="s1", last_query="near SJSU", last_results=many)
    llm = FakeLLM("Lot b is the safest option.")

    answer = await answer_follow_up("which is safest?", many, context, llm)

    assert answer.answer == "Lot b is the safest option."
    assert answer.needs_new_search is False
    assert ids(answer.results)[0] == "b"
    prompt = llm.calls[0]["prompt"]
    assert "near SJSU" in prompt
    assert "10. " in prompt and "11. " not in prompt
    assert "safety 4.9/5" in prompt


async def test_model_failure_returns_apology_and_still_filters(spots):
    answer = await answer_follow_up("which is safest?", spots, None, FakeLLM(RuntimeError("boom")))

    assert answer.answer == APOLOGY_ANSWER
    assert answer.needs_new_search is False
    assert ids(answer.results) == ["b", "d", "f", "c", "g"]


async def test_without_model_answer_is_deterministic(spots):
    answer = await answer_follow_up("any covered ones?", spots, None, None)

    assert answer.answer == "From your last search, here are 2 matching spot(s)."
    assert ids(answer.results) == ["c", "e"]


def test_fallback_response_wording():
    assert fallback_response([]) == NO_RESULTS_MESSAGE
    assert fallback_response([make_spot("a")]) == (
        "I found 1 parking spot for you. Check the map to see locations and details."
    )
    assert fallback_response([make_spot("a"), make_spot("b")]).startswith("I found 2 parking spots")


async def test_generate_response_uses_model(spots):
    llm = FakeLLM("Lot f is cheap and close.")

    text = await generate_response("cheap parking", spots, llm)

    assert text == "Lot f is cheap and close."
    assert "Found 7 parking spots" in llm.calls[0]["prompt"]


async def test_generate_response_fallbacks(spots):
    llm = FakeLLM()
    assert await generate_response("cheap parking", [], llm) == NO_RESULTS_MESSAGE
    assert llm.calls == []

    failing = FakeLLM(RuntimeError("down"))
    assert (await generate_response("cheap parking", spots, failing)).startswith("I found 7")
