"""Outward message output."""

from audio_track_switcher.ui.emitter import MessageEmitter

__all__ = ["MessageEmitter"]
