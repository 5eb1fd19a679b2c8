"""Shared fixtures: fake time, fake curses windows, sidecar files, isolated config and logging"""

import curses
import json

import pytest

from lyrplay import config as config_module
from lyrplay.config import ConfigManager
from lyrplay.log import LOGGER


class FakeTime:
	"""Manually advanced time source"""

	def __init__(self, now=0.0):
		self.now = now

	def __call__(self):
		return self.now

	def advance(self, seconds):
		self.now += seconds


class FakeWindow:
	"""Curses window stand-in that remembers what was drawn where"""

	def __init__(self, height, width):
		self.height = height
		self.width = width
		self.text = {}

	def set_size(self, height, width):
		self.height = height
		self.width = width

	def getmaxyx(self):
		return self.height, self.width

	def addstr(self, y, x, text, attr=0):
		self.text[(y, x)] = text

	def contains(self, needle):
		return any(needle in text for text in self.text.values())

	def erase(self):
		self.text = {}

	def border(self):
		pass

	def box(self):
		pass

	def nodelay(self, flag):
		pass

	def keypad(self, flag):
		pass

	def noutrefresh(self):
		pass

	def getch(self):
		return -1


@pytest.fixture
def fake_time():
	return FakeTime()


@pytest.fixture(autouse=True)
def isolated_logs(tmp_path, monkeypatch):
	"""Keep log files under tmp_path and leave LOGGER inert afterwards"""
	monkeypatch.setitem(config_module.DEFAULT_CONFIG["global"], "logs_dir", str(tmp_path / "logs"))
	yield tmp_path / "logs"
	LOGGER.LOG_DIR = None


@pytest.fixture
def config_manager(tmp_path, monkeypatch):
	monkeypatch.delenv("DEBUG", raising=False)
	return ConfigManager(use_default=True, config_dir=str(tmp_path / "config"))


@pytest.fixture
def write_sidecar(tmp_path):
	"""Write a sidecar next to a fake audio path; returns the sidecar path"""

	def _write(content, name="song.json"):
		path = tmp_path / name
		if isinstance(content, bytes):
			path.write_bytes(content)
		elif isinstance(content, str):
			path.write_text(content, encoding="utf-8")
		else:
			path.write_text(json.dumps(content, ensure_ascii=False), encoding="utf-8")
		return str(path)

	return _write



@pytest.fixture
def curses_screen(monkeypatch):
	"""Patch the curses calls Display makes so it can draw into FakeWindows"""

	def newwin(height, width, y, x):
		return FakeWindow(height, width)

	def no_colors():
		raise curses.error("no colors")

	monkeypatch.setattr(curses, "newwin", newwin)
	monkeypatch.setattr(curses, "curs_set", lambda visibility: None)
	monkeypatch.setattr(curses, "start_color", no_colors)
	monkeypatch.setattr(curses, "color_pair", lambda number: 0)
	monkeypatch.setattr(curses, "doupdate", lambda: None)
	return FakeWindow
