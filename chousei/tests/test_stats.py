"""Tests for slot statistics aggregation and ranking."""

from chousei.models.schedule import AvailabilityStatus, DailyAvailability, Event, RespondentEntry, SlotAvailability
from chousei.schedule import compute_slot_statistics, top_slots

AVAILABLE = AvailabilityStatus.AVAILABLE
MAYBE = AvailabilityStatus.MAYBE


def _key(stat):
    return (stat.date, stat.slot_id)


class TestComputeSlotStatistics:
    def test_scenario_top_row(self, event, scenario_entries):
        stats = compute_slot_statistics(event, scenario_entries)
        assert len(stats) == 4
        top = stats[0]
        assert (top.date, top.slot_id) == ("2024-07-01", "AM")
        assert top.slot_label == "9:00 - 14:00"
        assert (top.available_count, top.maybe_count, top.unavailable_count, top.total_entries) == (2, 0, 1, 3)

    def test_scenario_full_ranking(self, event, scenario_entries):
        stats = compute_slot_statistics(event, scenario_entries)
        assert [_key(s) for s in stats] == [
            ("2024-07-01", "AM"),
            ("2024-07-01", "PM"),
            ("2024-07-02", "AM"),
            ("2024-07-02", "PM"),
        ]
        pm = stats[1]
        assert (pm.available_count, pm.maybe_count, pm.unavailable_count) == (1, 1, 1)
        assert all(s.unavailable_count == 3 for s in stats[2:])

    def test_counts_never_exceed_total_and_order_is_non_increasing(self, event, make_entry):
        entries = [
            make_entry("A", {("2024-07-02", "PM"): AVAILABLE}, fill=None),
            make_entry("B", {("2024-07-02", "PM"): AVAILABLE, ("2024-07-01", "AM"): MAYBE}, fill=None),
            make_entry("C", {("2024-07-01", "PM"): MAYBE}, fill=AVAILABLE),
        ]
        stats = compute_slot_statistics(event, entries)
        for s in stats:
            assert s.available_count + s.maybe_count + s.unavailable_count <= s.total_entries == 3
        pairs = [(s.available_count, s.maybe_count) for s in stats]
        assert pairs == sorted(pairs, reverse=True)
        assert _key(stats[0]) == ("2024-07-02", "PM")

    def test_unset_counts_only_toward_total(self, event, make_entry):
        stats = compute_slot_statistics(event, [make_entry("A", fill=None)])
        assert all(
            (s.available_count, s.maybe_count, s.unavailable_count, s.total_entries) == (0, 0, 0, 1)
            for s in stats
        )

    def test_zero_entries(self, event):
        stats = compute_slot_statistics(event, [])
        assert [_key(s) for s in stats] == [
            ("2024-07-01", "AM"),
            ("2024-07-01", "PM"),
            ("2024-07-02", "AM"),
            ("2024-07-02", "PM"),
        ]
        assert all(s.available_count == s.maybe_count == s.unavailable_count == s.total_entries == 0 for s in stats)

    def test_ties_fall_back_to_date_then_slot(self, make_entry):
        event = Event(id="e", name="n", start_date="2024-07-09", end_date="2024-07-10", created_at="x")
        entry = RespondentEntry(
            id="1",
            event_id="e",
            name="A",
            availabilities=[
                DailyAvailability(date="2024-07-10", slots=[
                    SlotAvailability(slot_id="PM", status=AVAILABLE),
                    SlotAvailability(slot_id="AM", status=AVAILABLE),
                ]),
                DailyAvailability(date="2024-07-09", slots=[
                    SlotAvailability(slot_id="PM", status=AVAILABLE),
                    SlotAvailability(slot_id="AM", status=AVAILABLE),
                ]),
            ],
            last_updated_at="x",
        )
        stats = compute_slot_statistics(event, [entry])
        assert [_key(s) for s in stats] == [
            ("2024-07-09", "AM"),
            ("2024-07-09", "PM"),
            ("2024-07-10", "AM"),
            ("2024-07-10", "PM"),
        ]

    def test_missing_date_is_treated_as_unset(self, event):
        entry = RespondentEntry(
            id="1",
            event_id=event.id,
            name="Partial",
            availabilities=[
                DailyAvailability(date="2024-07-02", slots=[SlotAvailability(slot_id="AM", status=AVAILABLE)]),
            ],
            last_updated_at="x",
        )
        stats = {_key(s): s for s in compute_slot_statistics(event, [entry])}
        assert stats[("2024-07-02", "AM")].available_count == 1
        assert stats[("2024-07-01", "AM")].available_count == 0
        assert stats[("2024-07-01", "AM")].total_entries == 1
        assert stats[("2024-07-02", "PM")].unavailable_count == 0

    def test_input_order_does_not_matter(self, event, scenario_entries):
        forward = compute_slot_statistics(event, scenario_entries)
        backward = compute_slot_statistics(event, list(reversed(scenario_entries)))
        assert forward == backward

    def test_invalid_event_range_yields_nothing(self, scenario_entries):
        event = Event(id="e", name="n", start_date="2024-07-01", end_date="bad", created_at="x")
        assert compute_slot_statistics(event, scenario_entries) == []


class TestTopSlots:
    def test_returns_rows_tied_for_best(self, event, make_entry):
        entries = [make_entry("A", {("2024-07-01", "PM"): AVAILABLE, ("2024-07-02", "AM"): AVAILABLE})]
        best = top_slots(compute_slot_statistics(event, entries))
        assert [_key(s) for s in best] == [("2024-07-01", "PM"), ("2024-07-02", "AM")]

    def test_empty_when_nobody_is_available(self, event, make_entry):
        assert top_slots(compute_slot_statistics(event, [make_entry("A")])) == []
        assert top_slots([]) == []
