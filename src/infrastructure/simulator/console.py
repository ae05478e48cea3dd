"""Logging implementations of the alert output ports.

Stand-ins for a real display and sound device when running headless.
"""

from __future__ import annotations

import logging

from domain.alerting.errors import AudioPlaybackRejectedError

logger = logging.getLogger(__name__)

PULL_UP_TEXT = "PULL UP"


class LoggingAlertPresenter:
    """Logs when the alert becomes visible; counts blink frames."""

    def __init__(self) -> None:
        self.visible = False
        self.frames_shown = 0

    def set_visual_alert(self, on: bool) -> None:
        if on:
            self.frames_shown += 1
            if not self.visible:
                logger.warning(PULL_UP_TEXT)
        self.visible = on


class LoggingAudioAnnunciator:
    """Logs each aural alert.

    Starts unarmed when ``requires_arming`` is set, rejecting playback the
    way a browser does before the first user interaction.
    """

    def __init__(self, requires_arming: bool = False) -> None:
        self._armed = not requires_arming
        self.played = 0
        self.rejected = 0

    @property
    def armed(self) -> bool:
        return self._armed

    def arm(self) -> None:
        self._armed = True

    def request_audio_alert(self) -> None:
        if not self._armed:
            self.rejected += 1
            raise AudioPlaybackRejectedError("audio not armed; interaction required")
        self.played += 1
        logger.warning("AURAL: terrain, terrain, %s", PULL_UP_TEXT.lower())
