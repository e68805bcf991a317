import pytest

from elevationprofile.controller.line_sampler import LineSampler, sample_line, step_size_for
from elevationprofile.model.points import SampledPoint, WorldPoint, round_coordinate
from elevationprofile.model.state import PickState


def _pick(sampler: LineSampler, p1: tuple, p2: tuple):
    sampler.add_point(WorldPoint(*p1))
    return sampler.add_point(WorldPoint(*p2))


def _xy(points: list[SampledPoint]) -> list[tuple[float, float]]:
    return [p.as_tuple() for p in points]


def test_long_line_uses_coarse_step():
    sampler = LineSampler()
    result = _pick(sampler, (0, 0, 0), (2, 1, 0))

    assert _xy(result) == [(0.0, 0.0), (0.5, 0.25), (1.0, 0.5), (1.5, 0.75), (2.0, 1.0)]
    assert sampler.get_points() == result


def test_short_line_uses_fine_step():
    sampler = LineSampler()
    result = _pick(sampler, (0, 0, 0), (0.5, 0.5, 0))

    assert _xy(result) == [(0.0, 0.0), (0.2, 0.2), (0.4, 0.4), (0.5, 0.5)]


def test_too_close_pair_is_rejected():
    lines = []
    sampled = []
    sampler = LineSampler(on_line=lambda a, b: lines.append((a, b)), on_sampled=sampled.append)

    assert _pick(sampler, (1, 1, 0), (1.05, 1.02, 0)) is None
    assert sampler.get_points() == []
    assert lines == []
    assert sampled == []
    assert sampler.state == PickState.IDLE


def test_vertical_pair_draws_line_but_does_not_sample():
    lines = []
    sampler = LineSampler(on_line=lambda a, b: lines.append((a, b)))

    assert _pick(sampler, (1, 0, 0), (1, 3, 0)) is None
    assert sampler.get_points() == []
    assert len(lines) == 1
    assert sampler.state == PickState.IDLE


def test_abort_clears_previous_sequence():
    sampler = LineSampler()
    _pick(sampler, (0, 0, 0), (2, 1, 0))
    assert sampler.get_points()

    _pick(sampler, (1, 0, 0), (1, 3, 0))
    assert sampler.get_points() == []


@pytest.mark.parametrize("p1, p2", [
    ((0.0, 0.0, 0.0), (3.3, -1.7, 0.0)),
    ((4.123, 2.0, 1.0), (-2.5, 0.3, -1.0)),
    ((0.0, 0.0, 0.0), (0.3, 0.05, 0.0)),
    ((-1.0, 5.0, 0.0), (-0.55, 4.0, 0.0)),
])
def test_endpoints_and_monotonic_interior(p1, p2):
    sampler = LineSampler()
    result = _pick(sampler, p1, p2)

    assert result[0] == SampledPoint.rounded(p1[0], p1[1])
    assert result[-1] == SampledPoint.rounded(p2[0], p2[1])

    xs = [p.x for p in result]
    sign = 1 if p2[0] > p1[0] else -1
    assert all((b - a) * sign > 0 for a, b in zip(xs, xs[1:]))


def test_reverse_direction_mirrors_forward():
    forward = _pick(LineSampler(), (0, 0, 0), (2, 1, 0))
    backward = _pick(LineSampler(), (2, 1, 0), (0, 0, 0))

    assert _xy(backward) == list(reversed(_xy(forward)))


def test_buffer_state_transitions():
    sampler = LineSampler()
    assert sampler.state == PickState.IDLE

    assert sampler.add_point(WorldPoint(0, 0, 0)) is None
    assert sampler.state == PickState.ONE_PICKED
    assert len(sampler.pending_points) == 1

    sampler.add_point(WorldPoint(2, 1, 0))
    assert sampler.state == PickState.IDLE
    assert sampler.pending_points == []


def test_reset_discards_half_pick():
    sampler = LineSampler()
    sampler.add_point(WorldPoint(0, 0, 0))
    sampler.reset()

    # The next two points form a fresh pair
    result = _pick(sampler, (5, 5, 0), (6, 5, 0))
    assert result[0] == SampledPoint(5.0, 5.0)


def test_sampled_callback_receives_copy():
    received = []
    sampler = LineSampler(on_sampled=received.append)
    _pick(sampler, (0, 0, 0), (2, 1, 0))

    assert len(received) == 1
    received[0].clear()
    assert len(sampler.get_points()) == 5


def test_step_size_threshold():
    assert step_size_for(1.0) == 0.5
    assert step_size_for(0.999) == 0.2


def test_sample_line_ignores_pick_elevation():
    flat = sample_line(WorldPoint(0, 0, 0), WorldPoint(2, 1, 0), 2.236)
    raised = sample_line(WorldPoint(0, 0, 7), WorldPoint(2, 1, -3), 2.236)
    assert flat == raised


def test_round_coordinate_rounds_half_away_from_zero():
    assert round_coordinate(0.125) == 0.13
    assert round_coordinate(-0.125) == -0.13
    assert round_coordinate(1.005) == 1.0  # 1.005 is stored slightly below


def test_nearly_vertical_pair_keeps_only_endpoints():
    # |deltaX| below half a step: the loop must not run past p2
    points = sample_line(WorldPoint(0.0, 0.0, 0.0), WorldPoint(0.05, 0.5, 0.0), 0.5025)

    assert points == [SampledPoint(0.0, 0.0), SampledPoint(0.05, 0.5)]


def test_nearly_vertical_pair_in_reverse_terminates():
    sampler = LineSampler()
    sampler.add_point(WorldPoint(0.05, 0.5, 0.0))
    result = sampler.add_point(WorldPoint(0.0, 0.0, 0.0))

    assert result == [SampledPoint(0.05, 0.5), SampledPoint(0.0, 0.0)]
