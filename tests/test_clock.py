import threading

import pytest

from lyrplay.clock import ClockState, PlaybackClock
from lyrplay.errors import ClockMisuse


@pytest.fixture
def clock(fake_time):
	return PlaybackClock(time_source=fake_time)


def test_new_clock_is_stopped_at_zero(clock, fake_time):
	fake_time.advance(5)
	assert clock.state is ClockState.STOPPED
	assert clock.elapsed() == 0.0


def test_start_accumulates_from_zero(clock, fake_time):
	fake_time.advance(10)
	clock.start()
	fake_time.advance(1.5)
	assert clock.state is ClockState.RUNNING
	assert clock.elapsed() == pytest.approx(1.5)


def test_elapsed_frozen_while_paused(clock, fake_time):
	clock.start()
	fake_time.advance(2)
	clock.pause()
	first = clock.elapsed()
	fake_time.advance(30)
	assert clock.elapsed() == first
	assert clock.state is ClockState.PAUSED


def test_resume_continues_from_frozen_value(clock, fake_time):
	clock.start()
	fake_time.advance(2)
	clock.pause()
	frozen = clock.elapsed()
	fake_time.advance(30)
	clock.resume()
	assert clock.elapsed() >= frozen
	fake_time.advance(1)
	assert clock.elapsed() == pytest.approx(3.0)


def test_stop_resets(clock, fake_time):
	clock.start()
	fake_time.advance(4)
	clock.stop()
	assert clock.state is ClockState.STOPPED
	assert clock.elapsed() == 0.0


def test_stop_then_start_begins_again_from_zero(clock, fake_time):
	clock.start()
	fake_time.advance(4)
	clock.stop()
	clock.start()
	fake_time.advance(1)
	assert clock.elapsed() == pytest.approx(1.0)


@pytest.mark.parametrize("action", ["pause", "resume"])
def test_invalid_transition_from_stopped_is_ignored(clock, action):
	getattr(clock, action)()
	assert clock.state is ClockState.STOPPED
	assert clock.elapsed() == 0.0


def test_double_pause_does_not_corrupt_elapsed(clock, fake_time):
	clock.start()
	fake_time.advance(2)
	clock.pause()
	fake_time.advance(5)
	clock.pause()
	clock.resume()
	fake_time.advance(1)
	assert clock.elapsed() == pytest.approx(3.0)


def test_start_while_running_is_ignored(clock, fake_time):
	clock.start()
	fake_time.advance(2)
	clock.start()
	assert clock.elapsed() == pytest.approx(2.0)


def test_resume_while_running_is_ignored(clock, fake_time):
	clock.start()
	fake_time.advance(2)
	clock.resume()
	fake_time.advance(1)
	assert clock.elapsed() == pytest.approx(3.0)


def test_strict_clock_raises_on_misuse(fake_time):
	clock = PlaybackClock(time_source=fake_time, strict=True)
	with pytest.raises(ClockMisuse):
		clock.pause()
	clock.start()
	with pytest.raises(ClockMisuse):
		clock.resume()
	assert clock.state is ClockState.RUNNING


def test_correct_reanchors_running_clock(clock, fake_time):
	clock.start()
	fake_time.advance(10)
	clock.correct(7.5)
	assert clock.elapsed() == pytest.approx(7.5)
	fake_time.advance(0.5)
	assert clock.elapsed() == pytest.approx(8.0)


def test_correct_while_paused_stays_frozen(clock, fake_time):
	clock.start()
	fake_time.advance(3)
	clock.pause()
	clock.correct(2.0)
	fake_time.advance(3)
	assert clock.elapsed() == pytest.approx(2.0)


def test_correct_ignored_while_stopped(clock):
	clock.correct(5.0)
	assert clock.elapsed() == 0.0


def test_correct_rejects_negative_position(clock):
	clock.start()
	with pytest.raises(ValueError):
		clock.correct(-1)


def test_elapsed_monotonic_under_concurrent_pause_resume():
	clock = PlaybackClock()
	clock.start()
	samples = []
	done = threading.Event()

	def toggle():
		for _ in range(500):
			clock.pause()
			clock.resume()
		done.set()

	worker = threading.Thread(target=toggle)
	worker.start()
	while not done.is_set():
		samples.append(clock.elapsed())
	worker.join()
	samples.append(clock.elapsed())

	assert samples == sorted(samples)
	assert clock.state is ClockState.RUNNING
