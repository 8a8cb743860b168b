from __future__ import annotations

import pytest

from test_helpers import FakeRunner, RecordingHelper


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def recording_helper() -> RecordingHelper:
    return RecordingHelper()
