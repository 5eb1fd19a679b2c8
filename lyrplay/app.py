"""Command line entry point and the player loop"""

import argparse
import curses
import os
import sys
import time

from . import VERSION
from .audioinfo import SUPPORTED_FORMATS, AudioFile
from .config import ConfigManager
from .display import Display, DisplayEvent
from .errors import LyricsMalformed, PlayerError, UnsupportedFormat
from .log import LOGGER
from .lyrics_engine import LineKind, LyricsEngine
from .lyrics_parse import load_sidecar, lyrics_file_name
from .player import Player
from .scrolledbuf import ScrolledTextBuffer
from .timer import progress


def parse_args(argv=None):
	parser = argparse.ArgumentParser(
		prog="lyrplay",
		description="Terminal music player with synchronized lyrics",
		epilog="Supported formats: " + ", ".join(f.upper() for f in SUPPORTED_FORMATS),
	)
	parser.add_argument("file", help="Audio file to play; lyrics are read from the .json file next to it")
	parser.add_argument("-c", "--config", help="Path to configuration file")
	parser.add_argument("-d", "--default", action="store_true", help="Use default settings without loading a config file")
	parser.add_argument("--version", action="version", version=VERSION)
	return parser.parse_args(argv)


def fail(message):
	LOGGER.log_fatal(message)
	print(message, file=sys.stderr)
	return 1


class Session:
	"""Playback state the loop mutates: lyrics offset and scroll buffers"""

	def __init__(self, config_manager, audio_file, player, engine, display):
		self.config_manager = config_manager
		self.audio_file = audio_file
		self.player = player
		self.engine = engine
		self.display = display
		self.offset = 0.0
		cm = config_manager
		self.lyric_scroll = ScrolledTextBuffer(
			display.lyrics_width, separator=cm.SCROLL_SEPARATOR,
			interval=cm.SCROLL_INTERVAL, hold=cm.SCROLL_HOLD)
		self.name_scroll = ScrolledTextBuffer(
			display.name_width, text=display.file_name, separator=cm.SCROLL_SEPARATOR,
			interval=cm.SCROLL_INTERVAL, hold=cm.SCROLL_HOLD)

	def redraw(self):
		"""Draw the whole screen at the display's current size"""
		display = self.display
		if not display.fits:
			display.draw_too_small()
			return
		display.draw_ui()
		display.set_track_info(self.audio_file.metadata)
		display.set_file_quality(self.audio_file)
		display.set_playback_status(not self.player.is_paused())
		display.set_offset(self.offset)
		if not self.engine.has_lyrics:
			display.set_unavailable()
		self.lyric_scroll.reset(self.lyric_scroll.text, display.lyrics_width)
		self.name_scroll.reset(display.file_name, display.name_width)
		self.update_lyrics()

	def resize(self):
		self.display.resize()
		self.redraw()

	def adjust_offset(self, delta):
		self.offset = 0.0 if delta is None else round(self.offset + delta, 3)
		self.engine.reset()
		self.display.set_offset(self.offset)
		self.display.set_status_message(f"Lyrics offset {self.offset:+.1f}s")

	def update_lyrics(self):
		state = self.engine.advance(self.player.playtime() + self.offset)
		if state.kind is LineKind.NO_LYRICS:
			return
		if state.active:
			if state.is_new_line:
				LOGGER.log_trace(f"Line {state.index}: {state.line.text}")
				self.lyric_scroll.reset(state.line.text, self.display.lyrics_width)
		elif self.lyric_scroll.text:
			self.lyric_scroll.reset("", self.display.lyrics_width)
		self.display.set_text(self.lyric_scroll.tick())

	def tick(self):
		cm = self.config_manager
		self.player.sync_clock(cm.DRIFT_THRESHOLD)
		if not self.display.fits:
			return
		self.display.update_progress(progress(self.audio_file.length, self.player.playtime()))
		self.display.set_scrolled_name(self.name_scroll.tick())
		self.update_lyrics()

	def handle_event(self, event):
		"""Apply one input event; returns False when the user quits"""
		cm = self.config_manager
		player = self.player
		display = self.display

		if event is DisplayEvent.NOTHING:
			return True
		if event is DisplayEvent.QUIT:
			return False
		if event is DisplayEvent.RESIZE:
			self.resize()
			return True

		if event is DisplayEvent.PLAY or (event is DisplayEvent.TOGGLE_PAUSE and player.is_paused()):
			player.play()
			display.set_playback_status(True)
			display.set_status_message("Resumed")
		elif event is DisplayEvent.PAUSE or event is DisplayEvent.TOGGLE_PAUSE:
			player.pause()
			display.set_playback_status(False)
			display.set_status_message("Paused")
		elif event is DisplayEvent.MUTE:
			if player.is_muted():
				player.unmute()
				display.set_status_message("Unmuted")
			else:
				player.mute()
				display.set_status_message("Muted")
		elif event is DisplayEvent.VOLUME_UP:
			player.inc_volume()
			display.set_status_message(f"+ Volume ({player.get_volume()}%)")
		elif event is DisplayEvent.VOLUME_DOWN:
			player.dec_volume()
			display.set_status_message(f"- Volume ({player.get_volume()}%)")
		elif event is DisplayEvent.TIME_DECREASE:
			self.adjust_offset(-cm.OFFSET_STEP)
		elif event is DisplayEvent.TIME_INCREASE:
			self.adjust_offset(cm.OFFSET_STEP)
		elif event is DisplayEvent.TIME_JUMP_DECREASE:
			self.adjust_offset(-cm.OFFSET_JUMP)
		elif event is DisplayEvent.TIME_JUMP_INCREASE:
			self.adjust_offset(cm.OFFSET_JUMP)
		elif event is DisplayEvent.TIME_RESET:
			self.adjust_offset(None)
		elif event is DisplayEvent.INVALID:
			display.set_status_message("Unknown command")
		return True


def run(stdscr, config_manager, audio_file, player, engine):
	"""Draw the UI and poll until the track ends or the user quits"""
	display = Display(stdscr, config_manager, audio_file.file_name)
	if not display.fits:
		min_width, min_height = config_manager.MIN_SIZE
		return f"Terminal is too small! The minimum required size is {min_width}x{min_height}"

	session = Session(config_manager, audio_file, player, engine, display)
	player.play()
	session.redraw()

	while not player.is_finished():
		if not player.is_paused():
			session.tick()
		display.status_message_tick()
		display.refresh()

		if not session.handle_event(display.capture_event()):
			break
		time.sleep(config_manager.TICK)

	player.stop()
	return None


def main(argv=None):
	args = parse_args(argv)
	file = args.file

	config_manager = ConfigManager(config_path=args.config, use_default=args.default)
	LOGGER.configure(config_manager)

	if not os.path.isfile(file):
		return fail(f"File not found: {file}")

	try:
		audio_file = AudioFile.from_path(file)
	except UnsupportedFormat as e:
		return fail(str(e))

	# A missing sidecar disables lyrics; a broken one stops us here
	lyrics_path = lyrics_file_name(file)
	try:
		document = load_sidecar(lyrics_path)
	except LyricsMalformed as e:
		return fail(f"Malformed lyrics file {e.path}: {e.reason}")
	engine = LyricsEngine(document)

	try:
		player = Player(file)
	except PlayerError as e:
		return fail(str(e))

	print("Launching...")
	try:
		error = curses.wrapper(run, config_manager, audio_file, player, engine)
	except KeyboardInterrupt:
		error = None
	finally:
		player.destroy()

	if error:
		return fail(error)
	return 0


def cli():
	sys.exit(main())


if __name__ == "__main__":
	cli()
