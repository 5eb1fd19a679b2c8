import random

import pytest

from lyrplay.lyrics_engine import LineKind, LyricsEngine
from lyrplay.lyrics_parse import LyricLine, LyricsDocument, load_sidecar


def document(*lines):
	return LyricsDocument(lines=tuple(lines))


@pytest.fixture
def doc():
	return document(
		LyricLine("first", 0.5, 1.0),
		LyricLine("second", 1.2),
		LyricLine("third", 3.0, 4.0),
	)


def interval(lines, i):
	line = lines[i]
	ends = [line.end_time]
	if i + 1 < len(lines):
		ends.append(lines[i + 1].start_time)
	ends = [end for end in ends if end is not None]
	return line.start_time, min(ends) if ends else None


def expected_index(lines, t):
	"""Linear reference: scan every line for the one whose interval holds t"""
	if t < lines[0].start_time:
		return LineKind.BEFORE_FIRST_LINE, None
	owners = []
	for i in range(len(lines)):
		start, end = interval(lines, i)
		if start <= t and (end is None or t < end):
			owners.append(i)
	assert len(owners) <= 1
	if owners:
		return LineKind.ACTIVE, owners[0]
	if t >= lines[-1].start_time:
		return LineKind.AFTER_LAST_LINE, None
	return LineKind.INTERLUDE, None


def test_no_document_always_no_lyrics():
	engine = LyricsEngine(None)
	for t in (0.0, 1.0, 100.0):
		assert engine.advance(t).kind is LineKind.NO_LYRICS


def test_empty_document_is_no_lyrics():
	assert LyricsEngine(document()).advance(1.0).kind is LineKind.NO_LYRICS


def test_missing_sidecar_gives_no_lyrics(tmp_path):
	engine = LyricsEngine(load_sidecar(str(tmp_path / "song.json")))
	assert not engine.has_lyrics
	assert engine.advance(12.0).kind is LineKind.NO_LYRICS


def test_before_first_line(doc):
	state = LyricsEngine(doc).advance(0.2)
	assert state.kind is LineKind.BEFORE_FIRST_LINE
	assert state.line is None


def test_walks_through_lines(doc):
	engine = LyricsEngine(doc)

	state = engine.advance(0.5)
	assert state.active and state.line.text == "first" and state.is_new_line

	assert engine.advance(1.0).kind is LineKind.INTERLUDE

	state = engine.advance(1.2)
	assert state.line.text == "second" and state.is_new_line

	state = engine.advance(2.999)
	assert state.line.text == "second" and not state.is_new_line

	state = engine.advance(3.0)
	assert state.line.text == "third" and state.is_new_line


def test_after_last_line_with_explicit_end(doc):
	engine = LyricsEngine(doc)
	assert engine.advance(4.0).kind is LineKind.AFTER_LAST_LINE
	assert engine.advance(500.0).kind is LineKind.AFTER_LAST_LINE


def test_last_line_without_end_is_unbounded():
	engine = LyricsEngine(document(LyricLine("a", 0.0), LyricLine("b", 2.0)))
	state = engine.advance(10_000.0)
	assert state.active and state.line.text == "b"


def test_new_line_flag_fires_once_per_line(doc):
	engine = LyricsEngine(doc)
	flags = [engine.advance(t).is_new_line for t in (1.2, 1.5, 2.0, 2.5, 2.9)]
	assert flags == [True, False, False, False, False]


def test_repeated_time_is_idempotent(doc):
	engine = LyricsEngine(doc)
	first = engine.advance(1.7)
	second = engine.advance(1.7)
	assert (first.kind, first.index) == (second.kind, second.index)
	assert not second.is_new_line


def test_backward_seek_reenters_earlier_line(doc):
	engine = LyricsEngine(doc)
	engine.advance(0.7)
	engine.advance(3.5)
	state = engine.advance(0.7)
	assert state.line.text == "first"
	assert state.is_new_line


def test_reentering_after_interlude_is_new(doc):
	engine = LyricsEngine(doc)
	engine.advance(0.7)
	engine.advance(1.1)
	state = engine.advance(0.9)
	assert state.line.text == "first" and state.is_new_line


def test_reset_forces_new_line(doc):
	engine = LyricsEngine(doc)
	engine.advance(1.5)
	engine.reset()
	assert engine.advance(1.6).is_new_line


def test_tied_start_times_resolve_to_last():
	engine = LyricsEngine(document(
		LyricLine("x", 0.0),
		LyricLine("y", 1.0, 3.0),
		LyricLine("z", 1.0),
		LyricLine("w", 2.0),
	))
	assert engine.advance(0.5).line.text == "x"
	assert engine.advance(1.0).line.text == "z"
	assert engine.advance(1.5).line.text == "z"
	assert LyricsEngine(engine.document).advance(1.5).line.text == "z"


def test_overlapping_end_is_cut_at_next_start():
	engine = LyricsEngine(document(
		LyricLine("a", 0.0, 5.0),
		LyricLine("b", 2.0, 3.0),
		LyricLine("c", 10.0),
	))
	assert engine.effective_end(0) == 2.0
	assert engine.advance(1.0).line.text == "a"
	assert engine.advance(2.5).line.text == "b"
	assert engine.advance(4.0).kind is LineKind.INTERLUDE
	assert engine.advance(10.0).line.text == "c"


def test_effective_end(doc):
	engine = LyricsEngine(doc)
	assert [engine.effective_end(i) for i in range(3)] == [1.0, 3.0, 4.0]


def test_matches_linear_reference_in_any_order():
	rng = random.Random(42)
	for _ in range(50):
		start = 0.0
		lines = []
		for n in range(rng.randint(1, 10)):
			start += rng.choice([0.0, 0.5, 1.0, 2.5])
			end = start + rng.choice([0.2, 1.0, 4.0]) if rng.random() < 0.4 else None
			lines.append(LyricLine(f"l{n}", start, end))
		doc = document(*lines)
		engine = LyricsEngine(doc)

		times = [rng.uniform(-1.0, start + 3.0) for _ in range(60)]
		times += [line.start_time for line in lines]
		rng.shuffle(times)
		for t in times:
			state = engine.advance(t)
			kind, index = expected_index(lines, t)
			assert state.kind is kind, (lines, t)
			assert state.index == index
			fresh = LyricsEngine(doc).advance(t)
			assert (fresh.kind, fresh.index) == (state.kind, state.index)
