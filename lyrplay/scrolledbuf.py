"""Horizontal scrolling for text wider than its display area"""

import time

from wcwidth import wcwidth

from .log import LOGGER
from .timer import Timer

MIN_WIDTH = 1


def char_width(ch):
	width = wcwidth(ch)
	# Control characters report -1; curses still advances one cell
	return 1 if width < 0 else width


def display_width(text):
	return sum(char_width(ch) for ch in text)


class ScrolledTextBuffer:
	"""Marquee over one line of text.

	Text that fits in `width` columns is returned as is on every tick.
	Longer text is treated as the loop `text + separator` and each step
	moves the window one character to the left, wrapping forever until
	the next reset(). `interval` seconds must pass between steps (0 means
	every tick steps) and the window rests `hold` steps at the start of
	each pass.
	"""

	def __init__(self, width=MIN_WIDTH, text="", separator="   ", interval=0.0, hold=0,
				 time_source=time.monotonic):
		self.separator = separator
		self.hold = hold
		self._timer = Timer(interval, time_source) if interval > 0 else None
		self.reset(text, width)

	def reset(self, text, width=None):
		if width is None:
			width = self.width
		if width < MIN_WIDTH:
			LOGGER.log_debug(f"Scroll width {width} clamped to {MIN_WIDTH}")
			width = MIN_WIDTH

		self.text = text
		self.width = width
		self.offset = 0
		self._loop = text + self.separator
		self._rest = self.hold
		self.scrolling = display_width(text) > width
		if self._timer is not None:
			self._timer.reset()

	def frame(self):
		"""The currently visible slice, without advancing"""
		if not self.scrolling:
			return self.text

		visible = []
		used = 0
		loop_len = len(self._loop)
		for i in range(loop_len):
			ch = self._loop[(self.offset + i) % loop_len]
			w = char_width(ch)
			if used + w > self.width:
				break
			visible.append(ch)
			used += w
		return "".join(visible)

	def _step(self):
		if self._timer is not None:
			if not self._timer.expired():
				return
			self._timer.reset()

		if self._rest > 0:
			self._rest -= 1
			return

		self.offset = (self.offset + 1) % len(self._loop)
		if self.offset == 0:
			self._rest = self.hold

	def tick(self):
		"""Return the visible slice, then scroll one step if due"""
		visible = self.frame()
		if self.scrolling:
			self._step()
		return visible
