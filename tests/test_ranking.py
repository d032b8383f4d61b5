import pytest

from racereplay.analysis.ranking import is_finished, race_standings, rank


def test_leader_first(make_activity):
    slower = make_activity("slow", [(0, 0), (100, 300)])
    faster = make_activity("fast", [(0, 0), (100, 500)])
    assert rank([slower, faster], 100) == [1, 0]


def test_ties_keep_input_order(make_activity):
    a = make_activity("a", [(0, 0), (10, 100)])
    b = make_activity("b", [(0, 0), (10, 100)])
    c = make_activity("c", [(0, 0), (10, 50)])
    assert rank([a, b, c], 5) == [0, 1, 2]
    assert rank([b, a, c], 5) == [0, 1, 2]


def test_finished_activity_stays_ranked_by_distance(make_activity):
    short = make_activity("short", [(0, 0), (10, 100)])
    long = make_activity("long", [(0, 0), (10, 200), (40, 800)])
    standings = race_standings([short, long], 20)

    assert [s.index for s in standings] == [1, 0]
    assert standings[0].is_leader
    assert not standings[0].finished
    assert standings[1].finished
    assert standings[1].distance == pytest.approx(100)
    assert standings[1].progress_pct == pytest.approx(100)
    assert [s.position for s in standings] == [1, 2]


def test_zero_total_distance_is_never_finished(make_activity):
    still = make_activity("still", [(0, 0), (10, 0)])
    assert not is_finished(still, 0)
    assert race_standings([still], 10)[0].progress_pct == 0


def test_empty_field():
    assert rank([], 10) == []
    assert race_standings([], 10) == []
