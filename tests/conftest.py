from __future__ import annotations

import pytest

from modal_engine.engine import Engine, create_default_engine
from modal_engine.runtime import EngineSettings

from support import RecordingHost


@pytest.fixture
def host() -> RecordingHost:
    return RecordingHost()


@pytest.fixture
def engine(host: RecordingHost) -> Engine:
    return create_default_engine(host, settings=EngineSettings())
