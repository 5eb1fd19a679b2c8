"""Maps playback time onto the active lyric line"""

import bisect
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .lyrics_parse import LyricLine


class LineKind(Enum):
	NO_LYRICS = "no_lyrics"
	BEFORE_FIRST_LINE = "before_first_line"
	ACTIVE = "active"
	INTERLUDE = "interlude"
	AFTER_LAST_LINE = "after_last_line"


@dataclass(frozen=True)
class LineState:
	kind: LineKind
	line: Optional[LyricLine] = None
	index: Optional[int] = None
	is_new_line: bool = False

	@property
	def active(self):
		return self.kind is LineKind.ACTIVE


NO_LYRICS = LineState(LineKind.NO_LYRICS)
BEFORE_FIRST_LINE = LineState(LineKind.BEFORE_FIRST_LINE)
INTERLUDE = LineState(LineKind.INTERLUDE)
AFTER_LAST_LINE = LineState(LineKind.AFTER_LAST_LINE)


class LyricsEngine:
	"""Resolve elapsed time to a line of an immutable LyricsDocument.

	A line is active over [start_time, effective end). The effective end
	is its own end_time, cut off at the next line's start, else the
	next line's start, else unbounded, so intervals never overlap.
	Lookup is a bisect over start times; the previous result is only a
	fast-path hint, so backward jumps resolve the same as fresh lookups.
	Lines sharing a start time resolve to the last one.
	"""

	def __init__(self, document=None):
		self.document = document
		self._lines = document.lines if document is not None else ()
		self._starts = [line.start_time for line in self._lines]
		self._cursor = None
		self._hint = None

	@property
	def has_lyrics(self):
		return bool(self._lines)

	def reset(self):
		"""Forget the last resolved line, e.g. after a seek or offset change"""
		self._cursor = None
		self._hint = None

	def effective_end(self, index):
		"""End of the line's interval, never past the next line's start"""
		line = self._lines[index]
		next_start = None
		if index + 1 < len(self._lines):
			next_start = self._lines[index + 1].start_time
		if line.end_time is None:
			return next_start
		if next_start is None:
			return line.end_time
		return min(line.end_time, next_start)

	def _owns(self, index, elapsed):
		"""Whether `index` is the last line starting at or before `elapsed`"""
		if index >= len(self._starts) or self._starts[index] > elapsed:
			return False
		return index + 1 == len(self._starts) or elapsed < self._starts[index + 1]

	def _locate(self, elapsed):
		if self._hint is not None:
			for index in (self._hint, self._hint + 1):
				if self._owns(index, elapsed):
					return index
		return bisect.bisect_right(self._starts, elapsed) - 1

	def advance(self, elapsed):
		if not self._lines:
			return NO_LYRICS

		index = self._locate(elapsed)
		if index < 0:
			self.reset()
			return BEFORE_FIRST_LINE
		self._hint = index

		end = self.effective_end(index)
		if end is not None and elapsed >= end:
			self._cursor = None
			if index == len(self._lines) - 1:
				return AFTER_LAST_LINE
			return INTERLUDE

		is_new_line = index != self._cursor
		self._cursor = index
		return LineState(LineKind.ACTIVE, line=self._lines[index], index=index, is_new_line=is_new_line)
