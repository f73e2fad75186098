"""
Audio player widget state
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from app.services.audio import Lang, no_audio_message


class PlaybackState(str, Enum):
    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"


@dataclass
class MediaElement:
    """The audio element a player drives"""

    src: str
    current_time: float = 0.0
    paused: bool = True
    muted: bool = False

    def play(self) -> None:
        self.paused = False

    def pause(self) -> None:
        self.paused = True


def format_time(seconds: float) -> str:
    """Render seconds as m:ss"""
    if seconds is None or not math.isfinite(seconds):
        return "0:00"
    seconds = max(0.0, seconds)
    return f"{int(seconds // 60)}:{int(seconds % 60):02d}"


class AudioPlayer:
    """Play/pause toggle plus a drag-seekable progress track for one clip.

    While a drag is in progress, time updates coming from playback are
    ignored and the track shows the dragged position instead.
    """

    def __init__(self, src: Optional[str], label_cs: str, label_en: str, media: Optional[MediaElement] = None):
        self.src = src
        self.label_cs = label_cs
        self.label_en = label_en
        self.media = media if media is not None else (MediaElement(src) if src else None)
        self.state = PlaybackState.IDLE
        self.duration = 0.0
        self.position = 0.0
        self.drag: Optional[float] = None

    @property
    def available(self) -> bool:
        return self.media is not None

    @property
    def seeking(self) -> bool:
        return self.drag is not None

    def label(self, lang: Lang) -> str:
        return self.label_cs if lang == "cs" else self.label_en

    def unavailable_message(self, lang: Lang) -> str:
        return no_audio_message(lang)

    # Playback

    def toggle(self) -> PlaybackState:
        if not self.media:
            return self.state
        if self.state is PlaybackState.PLAYING:
            self.media.pause()
            self.state = PlaybackState.PAUSED
        else:
            self.media.play()
            self.state = PlaybackState.PLAYING
        return self.state

    def stop(self) -> None:
        if self.media:
            self.media.pause()
            self.media.current_time = 0.0
        self.state = PlaybackState.IDLE
        self.position = 0.0

    def toggle_mute(self) -> bool:
        if not self.media:
            return False
        self.media.muted = not self.media.muted
        return self.media.muted

    # Media events

    def on_loaded_metadata(self, duration: float) -> None:
        self.duration = duration if duration and math.isfinite(duration) and duration > 0 else 0.0

    def on_time_update(self, current_time: float) -> None:
        if self.seeking:
            return
        self.position = current_time or 0.0

    def on_ended(self) -> None:
        self.state = PlaybackState.IDLE
        self.position = 0.0
        if self.media:
            self.media.paused = True
            self.media.current_time = 0.0

    # Seeking

    def time_from_pointer(self, client_x: float, track_left: float, track_width: float) -> float:
        if not self.duration or track_width <= 0:
            return 0.0
        pct = min(1.0, max(0.0, (client_x - track_left) / track_width))
        return pct * self.duration

    def _seek_to(self, client_x: float, track_left: float, track_width: float) -> float:
        target = self.time_from_pointer(client_x, track_left, track_width)
        self.drag = target
        if self.media:
            self.media.current_time = target
        return target

    def begin_seek(self, client_x: float, track_left: float, track_width: float) -> float:
        return self._seek_to(client_x, track_left, track_width)

    def move_seek(self, client_x: float, track_left: float, track_width: float) -> float:
        return self._seek_to(client_x, track_left, track_width)

    def end_seek(self, client_x: float, track_left: float, track_width: float) -> float:
        target = self._seek_to(client_x, track_left, track_width)
        self.drag = None
        self.position = target
        return target

    # Rendering

    @property
    def shown_time(self) -> float:
        return self.drag if self.drag is not None else self.position

    @property
    def progress(self) -> float:
        """Filled share of the track, in percent"""
        if not self.duration:
            return 0.0
        return min(100.0, max(0.0, self.shown_time / self.duration * 100))

    @property
    def time_label(self) -> str:
        return f"{format_time(self.shown_time)} / {format_time(self.duration)}"
