import pytest

from modal_engine.keymaps import (
    ActionRef,
    Binding,
    CountPrefix,
    Custom,
    KeySequence,
    KeymapConflictError,
    KeymapRegistry,
    MatchState,
    SingleToken,
    TokenSequence,
    load_default_keymaps,
)
from modal_engine.modes import ModeContext


def make_action(action_id: str = "core.test") -> ActionRef:
    return ActionRef(id=action_id, handler=lambda: None)


def make_binding(
    *,
    binding_id: str,
    mode: str = "normal",
    pattern: object = "gg",
    action_id: str = "core.test",
) -> Binding:
    return Binding(
        id=binding_id,
        mode=mode,
        pattern=pattern,  # type: ignore[arg-type]
        action_id=action_id,
    )


def test_register_binding_success() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    binding = make_binding(binding_id="normal.gg")

    registry.register_binding(binding)

    assert registry.stats().binding_count == 1
    assert list(registry.iter_bindings(mode="normal")) == [binding]
    assert list(registry.iter_bindings(mode="insert")) == []


def test_duplicate_key_signature_is_kept_in_order() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())

    first = registry.register_binding(make_binding(binding_id="first"))
    second = registry.register_binding(make_binding(binding_id="second"))

    assert registry.detect_conflicts(second) == [first]
    assert [b.id for b in registry.iter_bindings("normal")] == ["first", "second"]


def test_strict_registration_rejects_conflicts() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    registry.register_binding(make_binding(binding_id="normal.gg"))

    with pytest.raises(KeymapConflictError) as excinfo:
        registry.register_binding(make_binding(binding_id="normal.gg.duplicate"), strict=True)

    assert [b.id for b in excinfo.value.conflicts] == ["normal.gg"]
    assert registry.stats().binding_count == 1


def test_same_keys_in_other_modes_do_not_conflict() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    registry.register_binding(make_binding(binding_id="normal.gg"))

    registry.register_binding(make_binding(binding_id="insert.gg", mode="insert"), strict=True)

    assert registry.stats().modes == ("insert", "normal")


def test_custom_patterns_never_conflict() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())

    def step(captured: tuple[str, ...], token: str) -> MatchState:
        return MatchState.REJECT

    registry.register_binding(make_binding(binding_id="one", pattern=Custom(step)))
    registry.register_binding(make_binding(binding_id="two", pattern=Custom(step)), strict=True)

    assert registry.stats().binding_count == 2


def test_register_binding_requires_known_action() -> None:
    registry = KeymapRegistry()

    with pytest.raises(KeyError):
        registry.register_binding(make_binding(binding_id="orphan"))


def test_register_binding_rejects_duplicate_id() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    registry.register_binding(make_binding(binding_id="binding"))

    with pytest.raises(ValueError):
        registry.register_binding(make_binding(binding_id="binding", pattern="j"))


def test_register_action_replace() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())

    with pytest.raises(ValueError):
        registry.register_action(make_action())

    replacement = make_action()
    registry.register_action(replacement, replace=True)
    assert registry.get_action("core.test") is replacement


def test_register_helper_adds_action_once() -> None:
    registry = KeymapRegistry()
    action = make_action()

    registry.register(make_binding(binding_id="a", pattern="a"), action)
    registry.register(make_binding(binding_id="b", pattern="b"), action)

    assert registry.stats().action_count == 1
    with pytest.raises(ValueError):
        registry.register(make_binding(binding_id="c", pattern="c"), make_action())


def test_unregister_binding_bumps_revision() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    binding = make_binding(binding_id="binding")
    registry.register_binding(binding)
    before = registry.revision()

    removed = registry.unregister_binding("binding")

    assert removed == binding
    assert registry.stats().binding_count == 0
    assert registry.stats().modes == ()
    assert registry.revision() == before + 1
    assert registry.unregister_binding("binding") is None
    assert registry.revision() == before + 1


def test_lookups_raise_key_error() -> None:
    registry = KeymapRegistry()

    with pytest.raises(KeyError):
        registry.get_action("missing")
    with pytest.raises(KeyError):
        registry.get_binding("missing")


@pytest.mark.parametrize(
    ("spec", "expected"),
    [
        ("j", SingleToken("<j>")),
        ("gg", TokenSequence(("<g>", "<g>"))),
        ("<C-x>", SingleToken("<C-x>")),
        (KeySequence(("<g>", "<t>")), TokenSequence(("<g>", "<t>"))),
    ],
)
def test_binding_coerces_patterns(spec: object, expected: object) -> None:
    binding = make_binding(binding_id="b", pattern=spec)

    assert binding.pattern == expected


def test_binding_validation() -> None:
    with pytest.raises(ValueError):
        make_binding(binding_id="")
    with pytest.raises(ValueError):
        make_binding(binding_id="count", pattern=CountPrefix())
    with pytest.raises(ValueError):
        KeySequence(())
    with pytest.raises(TypeError):
        ActionRef(id="core.bad", handler="nope")  # type: ignore[arg-type]


def test_binding_tags_are_cleaned() -> None:
    binding = Binding(
        id="b",
        mode="normal",
        pattern="b",
        action_id="core.test",
        tags=(" scroll", "scroll", "", "nav "),
    )

    assert binding.tags == ("scroll", "nav")
    assert binding.key_signature == "<b>"


def test_load_default_keymaps_covers_each_mode() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(registry, ModeContext(registry=registry))

    assert registry.stats().modes == ("hint_select", "insert", "normal")
    assert registry.get_binding("normal.top").tokens == ("<g>", "<g>")
    assert registry.get_binding("normal.bottom").tokens == ("<G>",)
    assert registry.get_binding("normal.scroll_down").repeat is True
    assert registry.get_binding("normal.top").repeat is False
    assert registry.get_binding("insert.exit_escape").action_id == "core.enter_normal"
