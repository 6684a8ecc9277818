"""Notification sinks the dispatcher fans findings out to."""

from .base import AlertSink
from .log import LogSink
from .observer import ObserverSink
from .sms import SmsSink
from .voice import VoiceSink

__all__ = ["AlertSink", "LogSink", "ObserverSink", "SmsSink", "VoiceSink"]
