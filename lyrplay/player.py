"""Audio playback over pygame.mixer with a pausable playtime clock"""

import os

# Hide the pygame banner; the terminal is about to be taken over by curses
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pygame  # noqa: E402

from .clock import ClockState, PlaybackClock  # noqa: E402
from .errors import PlayerError  # noqa: E402
from .log import LOGGER  # noqa: E402

VOLUME_STEP = 0.1


class Player:
	"""One audio file on the mixer's music channel.

	The track is loaded paused; play() starts it. The PlaybackClock
	follows every transport call and sync_clock() keeps it anchored to
	the mixer's own position report.
	"""

	def __init__(self, file, clock=None, mixer=None):
		self.file = file
		self.mixer = mixer or pygame.mixer
		self.clock = clock or PlaybackClock()
		self._volume = 1.0
		self._muted = False
		self._started = False
		self._paused = True
		self._stopped = False

		try:
			if not self.mixer.get_init():
				self.mixer.init()
			self.mixer.music.load(file)
			self.mixer.music.set_volume(self._volume)
		except pygame.error as e:
			raise PlayerError(f"Unable to open {file}: {e}") from e

	def play(self):
		"""Start playback, or resume it if paused"""
		if self._stopped or not self._paused:
			return
		if not self._started:
			self.mixer.music.play()
			self.clock.start()
			self._started = True
		else:
			self.mixer.music.unpause()
			self.clock.resume()
		self._paused = False
		LOGGER.log_debug(f"Playing at {self.clock.elapsed():.3f}s")

	def resume(self):
		self.play()

	def pause(self):
		if not self._started or self._paused or self._stopped:
			return
		self.mixer.music.pause()
		self.clock.pause()
		self._paused = True
		LOGGER.log_debug(f"Paused at {self.clock.elapsed():.3f}s")

	def toggle_pause(self):
		if self._paused:
			self.play()
		else:
			self.pause()

	def stop(self):
		if self._stopped:
			return
		self.mixer.music.stop()
		self.clock.stop()
		self._stopped = True
		self._paused = False

	def destroy(self):
		self.stop()
		self.mixer.quit()

	def is_paused(self):
		return self._paused

	def is_finished(self):
		if self._stopped:
			return True
		return self._started and not self._paused and not self.mixer.music.get_busy()

	def _apply_volume(self):
		self.mixer.music.set_volume(0.0 if self._muted else self._volume)

	def mute(self):
		self._muted = True
		self._apply_volume()

	def unmute(self):
		self._muted = False
		self._apply_volume()

	def is_muted(self):
		return self._muted

	def inc_volume(self):
		self._volume = round(min(1.0, self._volume + VOLUME_STEP), 2)
		self._apply_volume()

	def dec_volume(self):
		self._volume = round(max(0.0, self._volume - VOLUME_STEP), 2)
		self._apply_volume()

	def get_volume(self):
		"""Volume in percent"""
		return int(round(self._volume * 100))

	def position(self):
		"""Mixer-reported position in seconds, or None if it has none"""
		pos = self.mixer.music.get_pos()
		if pos is None or pos < 0:
			return None
		return pos / 1000

	def playtime(self):
		return self.clock.elapsed()

	def sync_clock(self, threshold):
		"""Snap the clock to the mixer position when they drift apart.

		Returns True when a correction was applied.
		"""
		if self.clock.state is not ClockState.RUNNING:
			return False
		pos = self.position()
		if pos is None:
			return False
		drift = pos - self.clock.elapsed()
		if abs(drift) <= threshold:
			return False
		LOGGER.log_debug(f"Clock drift {drift:+.3f}s, correcting to {pos:.3f}s")
		self.clock.correct(pos)
		return True
