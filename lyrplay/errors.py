"""Exception taxonomy for lyrplay"""


class LyrplayError(Exception):
	"""Base exception for lyrplay"""


class LyricsUnavailable(LyrplayError):
	"""No lyrics for this track; playback continues without them"""


class LyricsMalformed(LyrplayError):
	"""Sidecar lyrics file exists but cannot be parsed or validated"""

	def __init__(self, reason, path=None):
		self.reason = reason
		self.path = path
		if path:
			super().__init__(f"{path}: {reason}")
		else:
			super().__init__(reason)


class ClockMisuse(LyrplayError):
	"""Invalid playback clock transition"""


class UnsupportedFormat(LyrplayError):
	"""Audio file extension is not one we can play"""


class PlayerError(LyrplayError):
	"""Audio device or decoder failure"""
