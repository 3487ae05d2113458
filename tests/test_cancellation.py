import random

from litreview.core.cancellation import CancellableRun, CancellationToken, PacingDelay


def test_cancellable_run_stops_at_next_item():
	token = CancellationToken()
	seen = []

	run = CancellableRun(['a', 'b', 'c'], token)
	for index, item in run:
		seen.append((index, item))
		if item == 'b':
			token.cancel()

	assert seen == [(1, 'a'), (2, 'b')]
	assert run.stopped


def test_checkpoint_reports_cancellation():
	token = CancellationToken()
	run = CancellableRun([1], token)
	assert not run.checkpoint()
	token.cancel()
	assert run.checkpoint()
	token.reset()
	assert not token.cancelled


def test_pacing_delay_stays_in_window():
	sleeps = []
	pacing = PacingDelay(2.0, 5.0, sleep=sleeps.append, rng=random.Random(7))
	for _ in range(20):
		pacing.wait()
	assert len(sleeps) == 20
	assert all(2.0 <= s <= 5.0 for s in sleeps)


def test_zero_window_never_sleeps():
	sleeps = []
	PacingDelay(0, 0, sleep=sleeps.append).wait()
	assert sleeps == []
