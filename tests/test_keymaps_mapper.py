from __future__ import annotations

import pytest

from modal_engine.keymaps import (
    ActionRef,
    Binding,
    Custom,
    KeymapRegistry,
    Mapper,
    MatchState,
)


def make_mapper(*, count_prefix: bool = False, **kwargs: object) -> tuple[Mapper, list[str]]:
    return Mapper("normal", count_prefix=count_prefix, **kwargs), []  # type: ignore[arg-type]


def bind(
    mapper: Mapper,
    calls: list[str],
    notation: str,
    name: str,
    *,
    repeat: bool = False,
) -> None:
    mapper.add(notation, lambda: calls.append(name), binding_id=name, repeat=repeat)


def feed_all(mapper: Mapper, notation: str) -> list[str]:
    from modal_engine.keys import parse_keys

    return [mapper.feed(token).status for token in parse_keys(notation)]


def test_two_token_sequence_accepts() -> None:
    mapper, calls = make_mapper()
    bind(mapper, calls, "gg", "top")

    first = mapper.feed("<g>")
    second = mapper.feed("<g>")

    assert first.status == "pending"
    assert second.status == "accept"
    assert second.binding_id == "top"
    assert second.tokens == ("<g>", "<g>")
    assert calls == ["top"]
    assert mapper.active == mapper.mappings


def test_unmatched_continuation_passes_whole_sequence_through() -> None:
    mapper, calls = make_mapper()
    bind(mapper, calls, "gg", "top")
    bind(mapper, calls, "j", "down")

    assert mapper.feed("<g>").status == "pending"
    assert [m.binding_id for m in mapper.active] == ["top"]

    resolution = mapper.feed("<x>")

    assert resolution.status == "exhausted"
    assert resolution.tokens == ("<g>", "<x>")
    assert resolution.pass_through is True
    assert calls == []
    assert mapper.active == mapper.mappings
    assert mapper.pending == ()


def test_active_set_narrows_from_previous_round_only() -> None:
    mapper, calls = make_mapper()
    bind(mapper, calls, "gg", "top")
    bind(mapper, calls, "j", "down")

    mapper.feed("<g>")
    # "j" was dropped on the first round and cannot come back mid-resolution
    resolution = mapper.feed("<j>")

    assert resolution.status == "exhausted"
    assert calls == []


def test_first_registered_mapping_wins_ties() -> None:
    mapper, calls = make_mapper()
    bind(mapper, calls, "a", "first")
    bind(mapper, calls, "a", "second")

    for _ in range(3):
        assert mapper.feed("<a>").binding_id == "first"

    assert calls == ["first", "first", "first"]


def test_mappings_after_the_winner_are_not_evaluated() -> None:
    mapper, calls = make_mapper()
    bind(mapper, calls, "a", "first")
    probed: list[str] = []

    def probe(captured: tuple[str, ...], token: str) -> MatchState:
        probed.append(token)
        return MatchState.REJECT

    mapper.add(Custom(probe), lambda: None, binding_id="probe")

    mapper.feed("<a>")
    mapper.feed("<b>")

    assert probed == ["<b>"]


def test_accept_beats_a_live_continue_registered_earlier() -> None:
    mapper, calls = make_mapper()
    bind(mapper, calls, "ga", "sequence")
    bind(mapper, calls, "g", "single")

    resolution = mapper.feed("<g>")

    assert resolution.binding_id == "single"
    assert calls == ["single"]
    assert mapper.active == mapper.mappings


@pytest.mark.parametrize("count", range(1, 100))
def test_count_prefix_repeats_action(count: int) -> None:
    mapper, calls = make_mapper(count_prefix=True)
    bind(mapper, calls, "x", "x", repeat=True)

    statuses = feed_all(mapper, f"{count}x")

    assert statuses[-1] == "accept"
    assert set(statuses[:-1]) == {"pending"}
    assert calls == ["x"] * count
    assert mapper.count.value == "1"


def test_zero_alone_runs_its_own_binding() -> None:
    mapper, calls = make_mapper(count_prefix=True)
    bind(mapper, calls, "0", "zero")
    bind(mapper, calls, "x", "x", repeat=True)

    resolution = mapper.feed("<0>")

    assert resolution.status == "accept"
    assert resolution.binding_id == "zero"
    assert calls == ["zero"]
    assert mapper.count.value == "1"


def test_zero_inside_a_count_is_a_digit() -> None:
    mapper, calls = make_mapper(count_prefix=True)
    bind(mapper, calls, "0", "zero")
    bind(mapper, calls, "x", "x", repeat=True)

    feed_all(mapper, "10x")

    assert calls == ["x"] * 10


def test_count_is_ignored_by_non_repeating_bindings() -> None:
    mapper, calls = make_mapper(count_prefix=True)
    bind(mapper, calls, "G", "bottom")

    feed_all(mapper, "5G")

    assert calls == ["bottom"]
    assert mapper.count.value == "1"


def test_count_survives_partial_reset_into_a_sequence() -> None:
    mapper, calls = make_mapper(count_prefix=True)
    bind(mapper, calls, "gg", "top")

    assert mapper.feed("<3>").status == "pending"
    refed = mapper.feed("<g>")

    assert refed.status == "pending"
    assert mapper.count.value == "3"
    assert [m.binding_id for m in mapper.active] == ["top"]

    assert mapper.feed("<g>").status == "accept"
    assert calls == ["top"]
    assert mapper.count.value == "1"


def test_count_followed_by_unmapped_token_exhausts() -> None:
    mapper, calls = make_mapper(count_prefix=True)
    bind(mapper, calls, "x", "x", repeat=True)

    mapper.feed("<5>")
    resolution = mapper.feed("<z>")

    assert resolution.status == "exhausted"
    assert resolution.tokens == ("<z>",)
    assert mapper.count.value == "1"
    assert calls == []


def test_pass_through_policy_decides_on_exhaustion() -> None:
    seen: list[tuple[str, ...]] = []

    def policy(tokens: object) -> bool:
        seen.append(tuple(tokens))  # type: ignore[arg-type]
        return False

    mapper, _ = make_mapper(pass_through=policy)

    resolution = mapper.feed("<q>")

    assert resolution.status == "exhausted"
    assert resolution.pass_through is False
    assert seen == [("<q>",)]


def test_failing_action_still_resets_the_mapper() -> None:
    mapper, _ = make_mapper(count_prefix=True)

    def boom() -> None:
        raise RuntimeError("host failure")

    mapper.add("x", boom, binding_id="boom", repeat=True)
    mapper.feed("<3>")

    with pytest.raises(RuntimeError):
        mapper.feed("<x>")

    assert mapper.count.value == "1"
    assert mapper.active == mapper.mappings


def test_full_and_partial_resets_are_distinct() -> None:
    mapper, calls = make_mapper(count_prefix=True)
    bind(mapper, calls, "x", "x", repeat=True)
    mapper.feed("<4>")
    mapper.feed("<2>")

    mapper.reset_preserving_count()
    assert mapper.count.value == "42"
    assert mapper.active == mapper.mappings

    mapper.reset_full()
    mapper.reset_full()
    assert mapper.count.value == "1"
    assert mapper.active == mapper.mappings


def test_registry_bindings_come_before_local_mappings() -> None:
    registry = KeymapRegistry()
    registry.register(
        Binding(id="normal.down", mode="normal", pattern="j", action_id="down"),
        ActionRef(id="down", handler=lambda: None),
    )
    mapper = Mapper("normal", registry=registry, count_prefix=True)
    mapper.add("j", lambda: None, binding_id="local.down")

    assert [m.binding_id for m in mapper.mappings] == ["count", "normal.down", "local.down"]
    assert mapper.feed("<j>").binding_id == "normal.down"


def test_registry_changes_apply_on_next_full_reset() -> None:
    registry = KeymapRegistry()
    calls: list[str] = []
    mapper = Mapper("normal", registry=registry)

    registry.register(
        Binding(id="normal.y", mode="normal", pattern="y", action_id="yank"),
        ActionRef(id="yank", handler=lambda: calls.append("y")),
    )
    mapper.reset_full()

    assert mapper.feed("<y>").status == "accept"
    assert calls == ["y"]
