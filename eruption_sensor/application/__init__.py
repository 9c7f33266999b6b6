"""Focus event delivery pipeline."""

from .delivery_sink import DeliverySink
from .normalizer import EventNormalizer
from .pipe_channel import ChannelState, PipeChannel
from .sensor_service import SensorService
from .source_adapters import AccessibilityFocusAdapter, CoarseFocusAdapter
from .suppressor import DuplicateSuppressor

__all__ = [
    "AccessibilityFocusAdapter",
    "ChannelState",
    "CoarseFocusAdapter",
    "DeliverySink",
    "DuplicateSuppressor",
    "EventNormalizer",
    "PipeChannel",
    "SensorService",
]
