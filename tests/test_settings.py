from __future__ import annotations

import pytest

from modal_engine.runtime import EngineSettings


def test_defaults() -> None:
    settings = EngineSettings()

    assert settings.scroll_step == 40
    assert settings.hint_symbols == "asdfjklASDFJKL"
    assert settings.initial_mode == "normal"


def test_from_env_reads_prefixed_variables() -> None:
    settings = EngineSettings.from_env(
        {
            "MODAL_ENGINE_SCROLL_STEP": "25",
            "MODAL_ENGINE_HINT_SYMBOLS": "jk",
            "MODAL_ENGINE_INITIAL_MODE": "insert",
        }
    )

    assert settings == EngineSettings(scroll_step=25, hint_symbols="jk", initial_mode="insert")


def test_from_env_falls_back_on_bad_values() -> None:
    settings = EngineSettings.from_env(
        {"MODAL_ENGINE_SCROLL_STEP": "fast", "MODAL_ENGINE_HINT_SYMBOLS": ""}
    )

    assert settings == EngineSettings()


def test_from_env_uses_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MODAL_ENGINE_SCROLL_STEP", "80")

    assert EngineSettings.from_env().scroll_step == 80


@pytest.mark.parametrize(
    "kwargs",
    [
        {"scroll_step": 0},
        {"hint_symbols": "a"},
        {"hint_symbols": "aab"},
        {"initial_mode": ""},
    ],
)
def test_invalid_settings(kwargs: dict[str, object]) -> None:
    with pytest.raises(ValueError):
        EngineSettings(**kwargs)  # type: ignore[arg-type]
