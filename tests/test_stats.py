"""
Tests for per-subject statistics and agenda queries.
"""

from datetime import date

import pytest

from studyplan.timetable.stats import blocks_on_day, ranked, subject_stats, total_hours, week_agenda


class TestSubjectStats:
    def test_single_block(self, store, at):
        block = store.create(subject="Physics", start=at(9), end=at(10, 30))
        assert subject_stats([block], at(0), at(23)) == {"Physics": 1.5}

    def test_sums_per_subject(self, store, at):
        blocks = [
            store.create(subject="Math", start=at(9), end=at(10)),
            store.create(subject="Math", start=at(11), end=at(11, 30)),
            store.create(subject="Physics", start=at(13), end=at(15)),
        ]
        assert subject_stats(blocks, at(0), at(23)) == {"Math": 1.5, "Physics": 2.0}

    def test_keys_are_raw_subjects(self, store, at):
        blocks = [
            store.create(subject="Math", start=at(9), end=at(10)),
            store.create(subject="math ", start=at(11), end=at(12)),
        ]
        assert subject_stats(blocks, at(0), at(23)) == {"Math": 1.0, "math ": 1.0}

    def test_window_inclusive_at_both_ends(self, store, at):
        first = store.create(subject="Math", start=at(9), end=at(10))
        last = store.create(subject="Physics", start=at(17), end=at(18))
        assert subject_stats([first, last], at(9), at(17)) == {"Math": 1.0, "Physics": 1.0}

    def test_start_outside_window_excluded(self, store, at):
        early = store.create(subject="Math", start=at(8), end=at(10))
        assert subject_stats([early], at(9), at(17)) == {}

    def test_overhanging_block_counted_in_full(self, store, at):
        late = store.create(subject="Math", start=at(16), end=at(20))
        assert subject_stats([late], at(9), at(17)) == {"Math": 4.0}

    def test_empty(self, at):
        assert subject_stats([], at(0), at(23)) == {}


class TestRanked:
    def test_most_hours_first(self):
        assert ranked({"Math": 1.0, "Physics": 2.5, "Art": 1.0}) == [
            ("Physics", 2.5),
            ("Art", 1.0),
            ("Math", 1.0),
        ]


class TestAgenda:
    @pytest.fixture
    def blocks(self, store, at):
        return [
            store.create(subject="Physics", start=at(14), end=at(15)),
            store.create(subject="Math", start=at(9), end=at(10)),
            store.create(subject="History", start=at(9, day=4), end=at(11, day=4)),
            store.create(subject="Art", start=at(9, day=9), end=at(10, day=9)),
        ]

    def test_blocks_on_day_sorted(self, blocks):
        assert [b.subject for b in blocks_on_day(blocks, date(2026, 3, 2))] == ["Math", "Physics"]

    def test_blocks_on_empty_day(self, blocks):
        assert blocks_on_day(blocks, date(2026, 3, 3)) == []

    def test_total_hours(self, blocks):
        assert total_hours(blocks_on_day(blocks, date(2026, 3, 2))) == 2.0

    def test_week_agenda_monday_first(self, blocks):
        agenda = week_agenda(blocks, date(2026, 3, 5))
        assert [d for d, _ in agenda] == [date(2026, 3, d) for d in range(2, 9)]
        by_day = {d: [b.subject for b in day_blocks] for d, day_blocks in agenda}
        assert by_day[date(2026, 3, 2)] == ["Math", "Physics"]
        assert by_day[date(2026, 3, 4)] == ["History"]
        assert "Art" not in sum(by_day.values(), [])
