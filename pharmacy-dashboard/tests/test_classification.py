"""
test_classification.py
======================
Tests for the pure parts of the engine:
 - arrival detection between fetches
 - day window and active / finished split
 - pagination
"""

import datetime

import pytest

from dashboard.classifier import classify, day_window
from dashboard.diff import detect_arrivals
from dashboard.pagination import Paginator
from dashboard.schemas import Ticket


# --------------------------------------------------------------------------
# ARRIVAL DETECTION
# --------------------------------------------------------------------------

def test_first_fetch_is_baseline(make_ticket):
    """
    ✅ The first load never announces arrivals, however many tickets it has.
    """
    current = [make_ticket(i) for i in range(1, 26)]
    assert detect_arrivals([], current) == []


def test_single_arrival(make_ticket):
    """
    ✅ {A,B} -> {A,B,C} announces C only.
    """
    a, b, c = make_ticket("A"), make_ticket("B"), make_ticket("C")
    arrivals = detect_arrivals([a, b], [a, b, c])
    assert [t.id for t in arrivals] == ["C"]


def test_same_size_swap_is_not_announced(make_ticket):
    """
    ✅ {A,B} -> {A,C} announces nothing (size did not grow).
    """
    a, b, c = make_ticket("A"), make_ticket("B"), make_ticket("C")
    assert detect_arrivals([a, b], [a, c]) == []


def test_shrinking_fetch_is_not_announced(make_ticket):
    a, b, c = make_ticket("A"), make_ticket("B"), make_ticket("C")
    assert detect_arrivals([a, b, c], [c]) == []


def test_arrivals_match_on_id_only(make_ticket):
    """
    ✅ A ticket whose fields changed but id did not is not an arrival.
    """
    a = make_ticket(1, name="Before")
    renamed = make_ticket(1, name="After", status=0)
    b = make_ticket(2)
    assert [t.id for t in detect_arrivals([a], [renamed, b])] == [2]


def test_tickets_without_id_are_never_announced(make_ticket):
    a = make_ticket(1)
    anonymous = make_ticket(None)
    assert detect_arrivals([a], [a, anonymous]) == []


# --------------------------------------------------------------------------
# DAY WINDOW
# --------------------------------------------------------------------------

def test_day_window_bounds():
    now = datetime.datetime(2024, 3, 14, 0, 0, 1)
    start, end = day_window(now)
    assert start == datetime.datetime(2024, 3, 14, 0, 0, 0)
    assert end == datetime.datetime(2024, 3, 14, 23, 59, 59, 999999)


def test_day_scoping_at_midnight(make_ticket):
    """
    ✅ Yesterday 23:59:59.999 is out, today 00:00:00.000 is in.
    """
    now = datetime.datetime(2024, 3, 14, 0, 0, 1)
    late = make_ticket("late", timestamp=datetime.datetime(2024, 3, 13, 23, 59, 59, 999000))
    early = make_ticket("early", timestamp=datetime.datetime(2024, 3, 14, 0, 0, 0))
    finished_late = make_ticket("finished-late", status=0,
                                timestamp=datetime.datetime(2024, 3, 13, 23, 59, 59, 999000))

    buckets = classify([late, early, finished_late], now)
    assert [t.id for t in buckets.active] == ["early"]
    assert buckets.finished == []


def test_end_of_day_is_inclusive(make_ticket):
    now = datetime.datetime(2024, 3, 14, 12, 0)
    last = make_ticket("last", timestamp=datetime.datetime(2024, 3, 14, 23, 59, 59, 999000))
    tomorrow = make_ticket("tomorrow", timestamp=datetime.datetime(2024, 3, 15, 0, 0, 0))
    assert [t.id for t in classify([last, tomorrow], now).active] == ["last"]


def test_classification_follows_the_clock(make_ticket):
    """
    ✅ The same snapshot classifies differently once the day rolls over.
    """
    ticket = make_ticket(1, timestamp=datetime.datetime(2024, 3, 14, 22, 0))
    snapshot = [ticket]
    assert len(classify(snapshot, datetime.datetime(2024, 3, 14, 23, 0)).active) == 1
    assert len(classify(snapshot, datetime.datetime(2024, 3, 15, 0, 5)).active) == 0


def test_aware_now_uses_local_day(make_ticket):
    local_now = datetime.datetime(2024, 3, 14, 10, 0)
    aware_now = local_now.astimezone()
    ticket = make_ticket(1, timestamp=local_now - datetime.timedelta(hours=1))
    assert classify([ticket], aware_now).active == [ticket]


# --------------------------------------------------------------------------
# ACTIVE / FINISHED SPLIT
# --------------------------------------------------------------------------

def test_status_split_keeps_newest_first(make_ticket, today):
    """
    ✅ Statuses [ACTIVE, OTHER, ACTIVE, OTHER, OTHER] -> 2 active, 3 finished,
    each newest first.
    """
    snapshot = [
        make_ticket("t1", status=1, minutes_ago=50),
        make_ticket("t2", status=0, minutes_ago=10),
        make_ticket("t3", status=1, minutes_ago=5),
        make_ticket("t4", status=2, minutes_ago=30),
        make_ticket("t5", status=None, minutes_ago=1),
    ]
    buckets = classify(snapshot, today)
    assert [t.id for t in buckets.active] == ["t3", "t1"]
    assert [t.id for t in buckets.finished] == ["t5", "t2", "t4"]


def test_equal_timestamps_keep_feed_order(make_ticket):
    snapshot = [make_ticket(i, minutes_ago=5) for i in (3, 1, 2)]
    assert [t.id for t in classify(snapshot, snapshot[0].timestamp).active] == [3, 1, 2]


def test_classify_does_not_mutate_snapshot(make_ticket, today):
    snapshot = [make_ticket(1, minutes_ago=30), make_ticket(2, minutes_ago=1)]
    original = list(snapshot)
    classify(snapshot, today)
    assert snapshot == original


def test_status_is_read_from_the_ticket():
    assert Ticket(patientrecord_id=1, status=1).is_active
    assert not Ticket(patientrecord_id=1, status=0).is_active
    assert not Ticket(patientrecord_id=1).is_active


def test_unexpected_statuses_land_in_finished(make_ticket, today):
    snapshot = [
        make_ticket("done", status="done", minutes_ago=3),
        make_ticket("half", status=1.5, minutes_ago=2),
        make_ticket("flag", status=True, minutes_ago=1),
        make_ticket("live", status=1, minutes_ago=4),
    ]
    buckets = classify(snapshot, today)
    assert [t.id for t in buckets.active] == ["live"]
    assert [t.id for t in buckets.finished] == ["flag", "half", "done"]


def test_unknown_bucket_raises(make_ticket, today):
    with pytest.raises(KeyError):
        classify([make_ticket(1)], today).get("archived")


# --------------------------------------------------------------------------
# PAGINATION
# --------------------------------------------------------------------------

def test_pagination_boundary():
    """
    ✅ 23 items, page size 10 -> 3 pages; page 3 has 3 items; page 4 is empty.
    """
    items = list(range(23))
    paginator = Paginator(page_size=10)
    assert paginator.total_pages(items) == 3
    assert paginator.slice(items, 1) == list(range(10))
    assert paginator.slice(items, 3) == [20, 21, 22]
    assert paginator.slice(items, 4) == []


def test_empty_bucket_has_zero_pages():
    paginator = Paginator(page_size=10)
    assert paginator.total_pages([]) == 0
    assert paginator.slice([]) == []


def test_current_page_is_not_clamped():
    """
    ✅ Shrinking the items below the current page yields an empty page,
    and the page number stays where the user left it.
    """
    paginator = Paginator(page_size=10)
    paginator.go_to(3)
    assert paginator.slice(list(range(25))) == [20, 21, 22, 23, 24]
    assert paginator.slice(list(range(15))) == []
    assert paginator.page == 3


def test_paginators_are_independent():
    active, finished = Paginator(), Paginator()
    active.go_to(2)
    assert finished.page == 1


def test_invalid_pages_rejected():
    paginator = Paginator()
    with pytest.raises(ValueError):
        paginator.go_to(0)
    with pytest.raises(ValueError):
        paginator.slice([1, 2, 3], -1)
    with pytest.raises(ValueError):
        Paginator(page_size=0)
