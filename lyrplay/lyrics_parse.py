"""Sidecar lyrics loading: JSON records -> immutable LyricsDocument"""

import json
import os
import re
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from .errors import LyricsMalformed, LyricsUnavailable
from .log import LOGGER

# Lines carrying only timing information
MARKER = "♪"

_DIGITS = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class LyricLine:
	text: str
	start_time: float
	end_time: Optional[float] = None


@dataclass(frozen=True)
class LyricsDocument:
	lines: Tuple[LyricLine, ...]
	sync_type: str = "LINE_SYNCED"

	def __len__(self):
		return len(self.lines)

	def __iter__(self):
		return iter(self.lines)

	def __getitem__(self, index):
		return self.lines[index]


def is_marker(text):
	return text == MARKER or text == ""


def _reject_constant(name):
	raise ValueError(f"invalid JSON constant {name}")


def _parse_ms(value, field, index):
	"""Convert a millisecond field (number or digit string) to seconds"""
	if isinstance(value, bool):
		raise LyricsMalformed(f"line {index}: {field} must be a number, got {value!r}")
	if isinstance(value, (int, float)):
		if value < 0:
			raise LyricsMalformed(f"line {index}: {field} is negative ({value})")
		return value / 1000
	if isinstance(value, str) and _DIGITS.fullmatch(value):
		return int(value) / 1000
	raise LyricsMalformed(f"line {index}: {field} must be a non-negative number, got {value!r}")


def _parse_record(record, index):
	if not isinstance(record, dict):
		raise LyricsMalformed(f"line {index}: expected an object, got {type(record).__name__}")
	if "startTimeMs" not in record:
		raise LyricsMalformed(f"line {index}: missing startTimeMs")
	if "words" not in record:
		raise LyricsMalformed(f"line {index}: missing words")

	words = record["words"]
	if not isinstance(words, str):
		raise LyricsMalformed(f"line {index}: words must be a string, got {type(words).__name__}")

	start = _parse_ms(record["startTimeMs"], "startTimeMs", index)

	# Upstream writes "0" when it has no end time
	end = record.get("endTimeMs")
	if end is None or end == "":
		end = None
	else:
		end = _parse_ms(end, "endTimeMs", index) or None

	if end is not None and end < start:
		raise LyricsMalformed(f"line {index}: endTimeMs precedes startTimeMs")

	return LyricLine(text=words, start_time=start, end_time=end)


def fix_end_times(lines):
	"""Fold marker lines into the end time of the line before them.

	A marker ("♪" or empty text) sets the end time of the most recent
	kept line to its own start time and is then dropped. Consecutive
	markers all target that same line, so the last one wins. A marker
	with nothing before it is dropped without touching anything.
	"""
	fixed = []
	for line in lines:
		if is_marker(line.text):
			if fixed:
				fixed[-1] = replace(fixed[-1], end_time=line.start_time)
			continue
		fixed.append(line)
	return fixed


def parse_lyrics(raw):
	"""Parse raw sidecar bytes into a LyricsDocument, raising LyricsMalformed"""
	if isinstance(raw, bytes):
		try:
			raw = raw.decode("utf-8")
		except UnicodeDecodeError as e:
			raise LyricsMalformed(f"not valid UTF-8: {e}") from e

	try:
		data = json.loads(raw, parse_constant=_reject_constant)
	except ValueError as e:
		raise LyricsMalformed(f"invalid JSON: {e}") from e

	sync_type = "LINE_SYNCED"
	if isinstance(data, dict) and "lines" in data:
		if data.get("error") is True:
			raise LyricsUnavailable("lyrics provider reported an error")
		sync_type = data.get("syncType") or sync_type
		if not isinstance(sync_type, str):
			raise LyricsMalformed("syncType must be a string")
		data = data["lines"]

	if not isinstance(data, list):
		raise LyricsMalformed(f"expected a list of lines, got {type(data).__name__}")

	lines = []
	for index, record in enumerate(data):
		line = _parse_record(record, index)
		if lines and line.start_time < lines[-1].start_time:
			raise LyricsMalformed(f"line {index}: startTimeMs goes backwards")
		lines.append(line)

	return LyricsDocument(lines=tuple(fix_end_times(lines)), sync_type=sync_type)


def lyrics_file_name(audio_file):
	"""Sidecar path: the audio path with its extension replaced by .json"""
	base_name, _ = os.path.splitext(audio_file)
	return f"{base_name}.json"


def load_sidecar(file_path):
	"""Load a sidecar lyrics file.

	Returns None when the file does not exist or the provider reported no
	lyrics. Raises LyricsMalformed (carrying the path) when the file is
	present but unusable.
	"""
	if not os.path.exists(file_path):
		LOGGER.log_info(f"No lyrics file at {file_path}")
		return None

	try:
		with open(file_path, "rb") as f:
			raw = f.read()
	except OSError as e:
		raise LyricsMalformed(f"cannot read file: {e}", path=file_path) from e

	try:
		document = parse_lyrics(raw)
	except LyricsMalformed as e:
		raise LyricsMalformed(e.reason, path=file_path) from e
	except LyricsUnavailable as e:
		LOGGER.log_warn(f"{file_path}: {e}")
		return None

	LOGGER.log_info(f"Loaded {len(document)} lyric lines from {file_path}")
	return document
