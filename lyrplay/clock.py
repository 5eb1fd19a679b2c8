"""Pausable elapsed-time source shared between the UI loop and transport calls"""

import threading
import time
from enum import Enum

from .errors import ClockMisuse
from .log import LOGGER


class ClockState(Enum):
	STOPPED = "stopped"
	RUNNING = "running"
	PAUSED = "paused"


class PlaybackClock:
	"""Elapsed playback time that freezes while paused.

	Every read and transition holds one lock, so pause/resume may come
	from an input thread while the render loop samples elapsed().
	Invalid transitions are ignored and logged, or raised as ClockMisuse
	when the clock is strict.
	"""

	def __init__(self, time_source=time.perf_counter, strict=False):
		self._now = time_source
		self._strict = strict
		self._lock = threading.Lock()
		self._state = ClockState.STOPPED
		# Elapsed time banked before the current running stretch
		self._banked = 0.0
		self._resumed_at = None

	@property
	def state(self):
		with self._lock:
			return self._state

	def _misuse(self, action):
		message = f"Clock {action}() ignored while {self._state.value}"
		if self._strict:
			raise ClockMisuse(message)
		LOGGER.log_debug(message)

	def _elapsed_locked(self):
		if self._state is ClockState.RUNNING:
			return self._banked + max(0.0, self._now() - self._resumed_at)
		return self._banked

	def start(self):
		with self._lock:
			if self._state is not ClockState.STOPPED:
				self._misuse("start")
				return
			self._banked = 0.0
			self._resumed_at = self._now()
			self._state = ClockState.RUNNING

	def pause(self):
		with self._lock:
			if self._state is not ClockState.RUNNING:
				self._misuse("pause")
				return
			self._banked = self._elapsed_locked()
			self._resumed_at = None
			self._state = ClockState.PAUSED

	def resume(self):
		with self._lock:
			if self._state is not ClockState.PAUSED:
				self._misuse("resume")
				return
			self._resumed_at = self._now()
			self._state = ClockState.RUNNING

	def stop(self):
		with self._lock:
			self._banked = 0.0
			self._resumed_at = None
			self._state = ClockState.STOPPED

	def elapsed(self):
		with self._lock:
			return self._elapsed_locked()

	def correct(self, position):
		"""Re-anchor elapsed time to the audio layer's reported position.

		This is the only operation that can move elapsed() backwards.
		Ignored while stopped.
		"""
		if position < 0:
			raise ValueError(f"position must be non-negative, got {position}")
		with self._lock:
			if self._state is ClockState.STOPPED:
				self._misuse("correct")
				return
			self._banked = float(position)
			if self._state is ClockState.RUNNING:
				self._resumed_at = self._now()
