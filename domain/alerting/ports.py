"""Domain Ports for alert outputs.

Presentation and audio are external collaborators; the core only emits
signals through these Protocols.
"""

from __future__ import annotations

from typing import Protocol


class AlertPresenter(Protocol):
    """Port for the visual "PULL UP" surface."""

    def set_visual_alert(self, on: bool) -> None:
        ...


class AudioAnnunciator(Protocol):
    """Port for the aural alert.

    May raise AudioPlaybackRejectedError when playback is refused.
    """

    def request_audio_alert(self) -> None:
        ...
