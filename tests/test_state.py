import dataclasses

import pytest

from pokedex.state import (
    FilterState,
    GoToPage,
    NextPage,
    PreviousPage,
    Resolved,
    SetCategory,
    SetGeneration,
    SetPageSize,
    SetQuery,
    transition,
)


@pytest.mark.parametrize(
    "action",
    [SetQuery("pika"), SetCategory("fire"), SetGeneration("3"), SetPageSize(12)],
)
def test_filter_changes_go_back_to_page_one(action):
    state = FilterState(page=4, total=200)

    assert transition(state, action).page == 1


def test_query_is_trimmed_and_lowercased():
    state = transition(FilterState(), SetQuery("  PikaChu "))

    assert state.query == "pikachu"


def test_transition_returns_new_state():
    before = FilterState()
    after = transition(before, SetCategory("Water"))

    assert before.category == ""
    assert after.category == "water"
    with pytest.raises(dataclasses.FrozenInstanceError):
        after.page = 3


def test_next_page_stops_at_last_page():
    state = FilterState(page_size=24, total=30)

    state = transition(state, NextPage())
    assert state.page == 2
    assert transition(state, NextPage()) == state


def test_previous_page_stops_at_first_page():
    state = FilterState(page=2, total=100)

    state = transition(state, PreviousPage())
    assert state.page == 1
    assert transition(state, PreviousPage()) == state


def test_go_to_page_is_clamped():
    state = FilterState(page_size=10, total=35)

    assert transition(state, GoToPage(3)).page == 3
    assert transition(state, GoToPage(99)).page == 4


def test_resolved_records_total_and_clamps_page():
    state = FilterState(page=9, page_size=24)

    state = transition(state, Resolved(30))

    assert state.total == 30
    assert state.page == 2
    assert transition(state, Resolved(0)).page == 1


def test_page_navigation_keeps_filters():
    state = FilterState(query="a", category="fire", generation="1", total=100)

    state = transition(state, NextPage())

    assert (state.query, state.category, state.generation) == ("a", "fire", "1")


def test_invalid_states_are_rejected():
    with pytest.raises(ValueError):
        FilterState(page=0)
    with pytest.raises(ValueError):
        FilterState(page_size=0)


def test_unknown_action_is_an_error():
    with pytest.raises(TypeError):
        transition(FilterState(), object())
