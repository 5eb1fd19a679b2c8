"""Terminal UI drawn with curses"""

import curses
import os
from enum import Enum

from .log import LOGGER
from .scrolledbuf import display_width
from .timer import Timer

HEADER = "[ lyrplay ]"
# Row of the lyrics box
INFOVIEW_OFFSET = 8
INFOVIEW_HEIGHT = 6
# Rows above the bottom edge
STATUSMSG_OFFSET = 6
PROGRESS_OFFSET = 5
# Columns taken by the box borders, margins and the "-> " marker
LYRICS_MARGIN = 15
PROGRESS_BLOCK = "▇"
KEY_LEGEND = "[G] Play │ [B] Pause │ [V] Mute │ [+/-] Volume │ [,/.] [[/]] Lyrics offset │ [0] Reset offset"

COLOR_NAMES = {
	"black": 0, "red": 1, "green": 2, "yellow": 3,
	"blue": 4, "magenta": 5, "cyan": 6, "white": 7
}

PAIR_ACTIVE = 1
PAIR_INACTIVE = 2
PAIR_ERROR = 3


class DisplayEvent(Enum):
	NOTHING = "nothing"
	PLAY = "play"
	PAUSE = "pause"
	TOGGLE_PAUSE = "toggle_pause"
	MUTE = "mute"
	VOLUME_UP = "volume_up"
	VOLUME_DOWN = "volume_down"
	TIME_DECREASE = "time_decrease"
	TIME_INCREASE = "time_increase"
	TIME_JUMP_DECREASE = "time_jump_decrease"
	TIME_JUMP_INCREASE = "time_jump_increase"
	TIME_RESET = "time_reset"
	RESIZE = "resize"
	INVALID = "invalid"
	QUIT = "quit"


# ================
#  INPUT HANDLING
# ================
def parse_single_key(key_str):
	"""Convert single key string to key code"""
	if key_str.startswith("KEY_"):
		return getattr(curses, key_str, None)
	elif len(key_str) == 1:
		return ord(key_str)
	return None


def parse_key_config(key_config):
	"""Convert key config strings to key codes"""
	if isinstance(key_config, list):
		return [parse_single_key(k) for k in key_config]
	return [parse_single_key(key_config)]


def load_key_bindings(config):
	"""Map key codes to DisplayEvents from the key_bindings config section"""
	bindings = {}
	for action, key_config in config.get("key_bindings", {}).items():
		try:
			event = DisplayEvent(action)
		except ValueError:
			LOGGER.log_warn(f"Unknown key binding action: {action}")
			continue
		for key in parse_key_config(key_config):
			if key is not None:
				bindings[key] = event
	return bindings


def event_for_key(key, bindings):
	if key is None or key == -1:
		return DisplayEvent.NOTHING
	if key == curses.KEY_RESIZE:
		return DisplayEvent.RESIZE
	return bindings.get(key, DisplayEvent.INVALID)


# ================
#  LAYOUT HELPERS
# ================
def get_color_value(color_input, max_colors=8):
	"""Convert color input to valid terminal color number"""
	if isinstance(color_input, int) or (isinstance(color_input, str) and color_input.isdigit()):
		return max(0, min(int(color_input), max_colors - 1))
	if isinstance(color_input, str):
		return COLOR_NAMES.get(color_input.lower(), 7)
	return 7


def progress_blocks(fraction, total_space):
	"""Number of filled progress cells, constrained to the bar"""
	return max(0, min(total_space, int(fraction * total_space)))


def lyrics_width(cols):
	"""Columns available to a lyric line inside the lyrics box"""
	return cols - LYRICS_MARGIN


def fit(text, width):
	"""Truncate to `width` display columns"""
	if width <= 0:
		return ""
	while text and display_width(text) > width:
		text = text[:-1]
	return text


class Display:
	"""Draws the player screen; never touches playback state"""

	def __init__(self, stdscr, config_manager, file):
		self.stdscr = stdscr
		self.config_manager = config_manager
		self.file_name = os.path.basename(file)
		self.message_timer = None
		self.key_bindings = load_key_bindings(config_manager.config)
		self.infoview = None

		curses.curs_set(0)
		stdscr.nodelay(True)
		stdscr.keypad(True)
		self._init_colors()
		self.resize()

	def resize(self):
		"""Re-read the terminal size and rebuild the lyrics box window"""
		self.lines, self.cols = self.stdscr.getmaxyx()
		self.fits = self.sizecheck()
		self.message_timer = None
		if self.fits:
			self.infoview = curses.newwin(INFOVIEW_HEIGHT, self.cols - 8, INFOVIEW_OFFSET, 4)
		LOGGER.log_debug(f"Terminal size {self.cols}x{self.lines}")

	def _init_colors(self):
		try:
			curses.start_color()
			curses.use_default_colors()
			max_colors = curses.COLORS if curses.COLORS > 8 else 8
			cm = self.config_manager
			curses.init_pair(PAIR_ACTIVE, get_color_value(cm.COLOR_ACTIVE, max_colors), -1)
			curses.init_pair(PAIR_INACTIVE, get_color_value(cm.COLOR_INACTIVE, max_colors), -1)
			curses.init_pair(PAIR_ERROR, get_color_value(cm.COLOR_ERROR, max_colors), -1)
		except curses.error as e:
			LOGGER.log_warn(f"Terminal colors unavailable: {e}")

	def sizecheck(self):
		min_width, min_height = self.config_manager.MIN_SIZE
		return self.lines >= min_height and self.cols >= min_width

	@property
	def lyrics_width(self):
		return lyrics_width(self.cols)

	@property
	def name_width(self):
		return self.cols - 8

	def _addstr(self, y, x, text, attr=0, win=None):
		win = win or self.stdscr
		try:
			win.addstr(y, x, text, attr)
		except curses.error:
			# Writing the bottom-right cell raises after drawing
			pass

	# ================
	#  STATIC PARTS
	# ================
	def draw_ui(self):
		self.stdscr.erase()
		self.stdscr.border()
		self._addstr(0, max(0, self.cols // 2 - len(HEADER) // 2), HEADER)
		self._addstr(self.lines - 4, 1, "─" * (self.cols - 2))

		for row, label in ((2, "Track:"), (3, "Album:"), (4, "Artist(s):")):
			self._addstr(row, 4, label)

		self._print_controls()
		self._print_lyricsarea()

	def _print_controls(self):
		self._addstr(self.lines - 3, 2, fit(KEY_LEGEND, self.cols - 4))
		exit_text = "[Q] Exit"
		self._addstr(self.lines - 2, self.cols - 2 - len(exit_text), exit_text)

	def _print_lyricsarea(self):
		self.infoview.erase()
		self.infoview.box()
		self._addstr(0, 2, "[ Lyrics ]", win=self.infoview)

	def draw_too_small(self):
		min_width, min_height = self.config_manager.MIN_SIZE
		self.stdscr.erase()
		self._addstr(0, 0, fit(f"Terminal too small, need {min_width}x{min_height}", self.cols))

	def set_track_info(self, metadata):
		width = self.cols - 20
		self._addstr(2, 15, fit(metadata.title, width))
		self._addstr(3, 15, fit(metadata.album, width))
		self._addstr(4, 15, fit(metadata.artist, width))

	def set_file_quality(self, audio_file):
		self._addstr(6, 4, fit(audio_file.quality(), self.cols - 8))

	# ================
	#  DYNAMIC PARTS
	# ================
	def set_playback_status(self, playing):
		self._addstr(self.lines - PROGRESS_OFFSET, 2, "[||]" if playing else "[|>]")

	def update_progress(self, progress):
		"""Draw elapsed/remaining labels and the progress bar"""
		row = self.lines - PROGRESS_OFFSET
		self._addstr(row, 7, f"[{progress.elapsed}]")
		remaining = f"[-{progress.remaining}]"
		right = self.cols - 2 - len(remaining)
		self._addstr(row, right, remaining)

		bar_start = 7 + len(progress.elapsed) + 3
		total_space = max(0, right - bar_start - 1)
		filled = progress_blocks(progress.fraction, total_space)
		self._addstr(row, bar_start, PROGRESS_BLOCK * filled + " " * (total_space - filled))

	def set_scrolled_name(self, text):
		row = INFOVIEW_OFFSET + INFOVIEW_HEIGHT + 1
		self._addstr(row, 4, text.ljust(self.name_width)[:self.name_width])

	def set_offset(self, offset):
		row = INFOVIEW_OFFSET + INFOVIEW_HEIGHT
		text = f" Offset: {offset:+.1f}s " if offset else ""
		x = self.cols - 4 - 16
		self._addstr(row, x, text.ljust(16), curses.A_BOLD)

	def clear_infoview(self):
		blank = " " * max(0, self.cols - 10)
		for ypos in range(1, INFOVIEW_HEIGHT - 1):
			self._addstr(ypos, 1, blank, win=self.infoview)

	def set_text(self, line):
		"""Show a lyric slice, or blank the box when it is empty"""
		self.clear_infoview()
		if not line:
			return
		attr = curses.A_BOLD | curses.color_pair(PAIR_ACTIVE)
		self._addstr(2, 2, "-> " + fit(line, self.lyrics_width), attr, win=self.infoview)

	def set_unavailable(self):
		self.clear_infoview()
		self._addstr(2, 2, "Unavailable", curses.A_ITALIC | curses.color_pair(PAIR_INACTIVE), win=self.infoview)

	def set_status_message(self, message, seconds=None):
		"""Show a message above the progress bar until its timer expires"""
		if self.message_timer is not None:
			self.clear_status_message()
		message = f"[ {message} ]"
		self._addstr(self.lines - STATUSMSG_OFFSET, max(1, self.cols // 2 - len(message) // 2),
					 message, curses.A_STANDOUT)
		self.message_timer = Timer(seconds if seconds is not None else self.config_manager.STATUS_MESSAGE_TIME)

	def clear_status_message(self):
		if self.message_timer is None:
			return
		self.message_timer = None
		self._addstr(self.lines - STATUSMSG_OFFSET, 1, " " * (self.cols - 2))

	def status_message_tick(self):
		if self.message_timer is not None and self.message_timer.expired():
			self.clear_status_message()

	def refresh(self):
		self.stdscr.noutrefresh()
		if self.fits:
			self.infoview.noutrefresh()
		curses.doupdate()

	def capture_event(self):
		try:
			key = self.stdscr.getch()
		except curses.error:
			return DisplayEvent.NOTHING
		return event_for_key(key, self.key_bindings)
