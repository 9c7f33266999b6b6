"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from eruption_sensor.application.delivery_sink import DeliverySink
from eruption_sensor.application.normalizer import EventNormalizer
from eruption_sensor.application.pipe_channel import PipeChannel
from tests.fakes.fake_focus_sources import FakeFocusTracker
from tests.fakes.fake_pipe import FakePipeOpener
from tests.helpers import SensorTestContext, StateRecorder


@pytest.fixture
def pipe_path(tmp_path: Path) -> Path:
    return tmp_path / "eruption-sensor"


@pytest.fixture
def temp_config_path(tmp_path: Path) -> Path:
    return tmp_path / "settings.yml"


@pytest.fixture
def pipe_opener() -> FakePipeOpener:
    return FakePipeOpener()


@pytest.fixture
def channel(pipe_path: Path, pipe_opener: FakePipeOpener) -> PipeChannel:
    return PipeChannel(pipe_path, pipe_opener)


@pytest.fixture
def state_recorder(channel: PipeChannel) -> StateRecorder:
    recorder = StateRecorder()
    channel.add_observer(recorder)
    return recorder


@pytest.fixture
def sink(channel: PipeChannel) -> DeliverySink:
    return DeliverySink(channel)


@pytest.fixture
def focus_tracker() -> FakeFocusTracker:
    return FakeFocusTracker()


@pytest.fixture
def normalizer(focus_tracker: FakeFocusTracker) -> EventNormalizer:
    return EventNormalizer(focus_tracker)


@pytest.fixture
def context(pipe_path: Path) -> SensorTestContext:
    return SensorTestContext(pipe_path=pipe_path)
