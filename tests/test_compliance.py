from __future__ import annotations

import pytest

from pysmartnav import geo
from pysmartnav.compliance import ComplianceMonitor, ComplianceTracker, require_route
from pysmartnav.exceptions import NoActiveRoute
from pysmartnav.ledger import CongestionLedger
from pysmartnav.models import Coordinate

ORIGIN = Coordinate.of(0.0, 0.0)


def test_empty_route_is_never_a_deviation() -> None:
    monitor = ComplianceMonitor()
    assert monitor.check_compliance(Coordinate.of(1.0, 1.0), []) is None
    with pytest.raises(NoActiveRoute):
        require_route(())


def test_empty_trace_is_never_a_deviation() -> None:
    assert ComplianceMonitor().check_compliance([], [ORIGIN]) is None
    assert ComplianceMonitor().check_compliance(None, [ORIGIN]) is None


def test_deviation_reports_nearest_point_and_distance() -> None:
    position = Coordinate.of(0.001, 0.001)
    deviation = ComplianceMonitor().check_compliance([ORIGIN, position], [ORIGIN])

    assert deviation is not None
    assert deviation.position == position
    assert deviation.nearest == ORIGIN
    assert deviation.distance_m == pytest.approx(157.43, abs=0.05)


def test_any_close_route_point_keeps_agent_on_route() -> None:
    route = [Coordinate.of(0.0, 0.01), Coordinate.of(0.0005, 0.0), Coordinate.of(0.01, 0.0)]
    assert ComplianceMonitor().check_compliance(ORIGIN, route) is None


def test_threshold_is_exclusive() -> None:
    # 100 m is not a deviation; the monitor requires strictly more.
    monitor = ComplianceMonitor(threshold_m=100.0)
    route = [ORIGIN]
    just_inside = Coordinate.of(99.0 / 111319.9, 0.0)
    just_outside = Coordinate.of(101.0 / 111319.9, 0.0)
    assert monitor.check_compliance(just_inside, route) is None
    assert monitor.check_compliance(just_outside, route) is not None


def test_exactly_at_threshold() -> None:
    # The monitor flags strictly more than the threshold; the tracker only
    # counts a location as on-route when strictly closer.
    at_boundary = Coordinate.of(0.001, 0.0)
    threshold = geo.distance(at_boundary, ORIGIN)

    assert ComplianceMonitor(threshold_m=threshold).check_compliance(at_boundary, [ORIGIN]) is None

    tracker = ComplianceTracker(threshold_m=threshold)
    assert not tracker.is_on_route(at_boundary, ORIGIN)
    assert tracker.update_compliance(at_boundary, ORIGIN) is True
    assert tracker.state.deviation_counts == {at_boundary: 1}


def test_tracker_counts_distinct_locations() -> None:
    tracker = ComplianceTracker()
    far = Coordinate.of(0.01, 0.0)

    assert tracker.update_compliance(far, ORIGIN) is True
    assert tracker.update_compliance(far, ORIGIN) is True
    assert tracker.state.deviation_counts == {far: 2}
    assert tracker.state.total_deviations == 2
    assert tracker.compliance_rate == pytest.approx(0.99)


def test_tracker_ignores_on_route_positions() -> None:
    tracker = ComplianceTracker()
    assert tracker.update_compliance(Coordinate.of(0.0001, 0.0), ORIGIN) is False
    assert tracker.state.deviation_counts == {}
    assert tracker.compliance_rate == 1.0


def test_rate_is_clamped_but_raw_value_is_kept() -> None:
    tracker = ComplianceTracker()
    suggested = Coordinate.of(0.0, 1.0)
    for i in range(101):
        tracker.record_deviation(Coordinate.of(i * 0.01, 0.0))

    assert tracker.compliance_rate == 0.0
    assert tracker.state.raw_compliance_rate == pytest.approx(-0.01)
    assert not tracker.is_on_route(ORIGIN, suggested)


def test_unclamped_rate_can_go_negative() -> None:
    tracker = ComplianceTracker(clamp_rate=False)
    for i in range(150):
        tracker.record_deviation(Coordinate.of(i * 0.01, 0.0))
    assert tracker.compliance_rate == pytest.approx(-0.5)


def test_ledger_tracks_latest_level_per_location() -> None:
    ledger = CongestionLedger()
    assert ledger.system_wide_congestion() is None

    a, b = Coordinate.of(1.0, 1.0), Coordinate.of(2.0, 2.0)
    ledger.update_congestion(a, 0.2)
    ledger.update_congestion(a, 0.6)
    ledger.update_congestion(b, 1.4)

    assert len(ledger) == 2
    assert ledger.get(a) == pytest.approx(0.6)
    assert ledger.get(b) == 1.0
    assert ledger.system_wide_congestion() == pytest.approx(0.8)


def test_ledger_merges_nearby_fixes() -> None:
    ledger = CongestionLedger()
    ledger.update_congestion(Coordinate.of(37.77491, -122.41941), 0.3)
    ledger.update_congestion(Coordinate.of(37.77493, -122.41938), 0.5)

    assert len(ledger) == 1
    assert ledger.get(Coordinate.of(37.7749, -122.4194)) == pytest.approx(0.5)


def test_ledger_drops_least_recently_updated_location() -> None:
    ledger = CongestionLedger(max_entries=2)
    a, b, c = Coordinate.of(1.0, 1.0), Coordinate.of(2.0, 2.0), Coordinate.of(3.0, 3.0)
    ledger.update_congestion(a, 0.1)
    ledger.update_congestion(b, 0.2)
    ledger.update_congestion(a, 0.3)
    ledger.update_congestion(c, 0.4)

    assert len(ledger) == 2
    assert ledger.get(b) is None
    assert ledger.get(a) == pytest.approx(0.3)
    assert ledger.get(c) == pytest.approx(0.4)
