"""Alerting Bounded Context - Error Hierarchy."""

from __future__ import annotations


class AlertingError(Exception):
    """Base error for alerting operations."""


class AudioPlaybackRejectedError(AlertingError):
    """The audio collaborator refused to start playback.

    Typical cause: the host environment requires a user interaction before
    sound may play. Never retried before the next eligible WARN tick.
    """
