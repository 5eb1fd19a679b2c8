"""Countdown timer and playback progress formatting"""

import time
from dataclasses import dataclass


class Timer:
	"""Countdown that expires `length` seconds after it was (re)started"""

	def __init__(self, length, time_source=time.monotonic):
		self._now = time_source
		self.length = length
		self.start = self._now()

	def reset(self):
		self.start = self._now()

	def rebuild(self, length):
		"""Like reset(), but also changes the length"""
		self.length = length
		self.reset()

	def expired(self):
		return self._now() - self.start >= self.length


@dataclass(frozen=True)
class Progress:
	elapsed: str
	remaining: str
	fraction: float


def format_time(seconds):
	"""mm:ss, or h:mm:ss from one hour on"""
	total = int(max(0.0, seconds))
	hours, rest = divmod(total, 3600)
	minutes, secs = divmod(rest, 60)
	if hours:
		return f"{hours}:{minutes:02}:{secs:02}"
	return f"{minutes:02}:{secs:02}"


def progress(total, elapsed):
	"""Elapsed/remaining labels and completed fraction for a progress bar"""
	elapsed = max(0.0, elapsed)
	if total > 0:
		fraction = min(1.0, elapsed / total)
	else:
		fraction = 0.0
	remaining = max(0.0, total - elapsed)
	return Progress(format_time(elapsed), format_time(remaining), fraction)
