"""
Unit tests for the polygon draft state machine.
"""
import pytest

from farmarea.domain.errors import DraftNotReadyError, ValidationError
from farmarea.domain.models import Point
from farmarea.services.domain.polygon_draft import DraftState, PolygonDraft
from farmarea.utils.coordinates import ViewportRect


CORNERS = [Point(x=10, y=10), Point(x=40, y=10), Point(x=35, y=40), Point(x=15, y=45)]


def _filled_draft(count: int, on_ready=None) -> PolygonDraft:
    draft = PolygonDraft(on_ready=on_ready)
    draft.begin()
    for point in CORNERS[:count]:
        draft.add_point(point)
    return draft


# ============================================================
# State Transition Tests
# ============================================================

class TestDraftStates:
    """Tests for draft state transitions."""

    def test_starts_idle(self):
        draft = PolygonDraft()

        assert draft.state == DraftState.IDLE
        assert not draft.is_active
        assert draft.points == ()

    def test_begin_enters_collecting(self):
        draft = PolygonDraft()
        draft.begin()

        assert draft.state == DraftState.COLLECTING
        assert draft.is_active
        assert draft.progress_label == "0/4 Pins Placed"

    def test_points_ignored_while_idle(self):
        draft = PolygonDraft()

        assert draft.add_point(CORNERS[0]) is False
        assert draft.point_count == 0

    @pytest.mark.parametrize("count", [1, 2, 3])
    def test_partial_draft_keeps_collecting(self, count):
        draft = _filled_draft(count)

        assert draft.state == DraftState.COLLECTING
        assert draft.point_count == count
        assert draft.progress_label == f"{count}/4 Pins Placed"

    def test_fourth_point_makes_ready(self):
        draft = _filled_draft(4)

        assert draft.state == DraftState.READY
        assert draft.is_ready
        assert draft.is_active

    def test_ready_is_a_ceiling(self):
        """A fifth click must not add a point or commit anything."""
        draft = _filled_draft(4)

        assert draft.add_point(Point(x=90, y=90)) is False
        assert draft.point_count == 4
        assert draft.state == DraftState.READY

    def test_points_keep_click_order(self):
        draft = _filled_draft(4)

        assert draft.points == tuple(CORNERS)

    def test_begin_discards_previous_points(self):
        draft = _filled_draft(2)
        draft.begin()

        assert draft.point_count == 0
        assert draft.state == DraftState.COLLECTING


class TestDraftReadyCallback:
    """Tests for the ready notification."""

    def test_fires_once_with_points(self):
        calls = []
        draft = _filled_draft(4, on_ready=calls.append)
        draft.add_point(Point(x=1, y=1))

        assert calls == [tuple(CORNERS)]

    def test_not_fired_for_partial_draft(self):
        calls = []
        _filled_draft(3, on_ready=calls.append)

        assert calls == []


# ============================================================
# Confirm / Cancel Tests
# ============================================================

class TestDraftConfirm:
    """Tests for committing a draft."""

    def test_confirm_returns_points_and_resets(self):
        draft = _filled_draft(4)

        points = draft.confirm()

        assert points == tuple(CORNERS)
        assert draft.state == DraftState.COMMITTED
        assert draft.points == ()
        assert not draft.is_active

    @pytest.mark.parametrize("count", [0, 1, 3])
    def test_confirm_before_ready_fails(self, count):
        draft = _filled_draft(count)

        with pytest.raises(DraftNotReadyError):
            draft.confirm()

        assert draft.point_count == count

    def test_confirm_while_idle_fails(self):
        with pytest.raises(DraftNotReadyError):
            PolygonDraft().confirm()

    def test_not_ready_is_a_validation_error(self):
        assert issubclass(DraftNotReadyError, ValidationError)

    def test_new_draft_after_commit(self):
        draft = _filled_draft(4)
        draft.confirm()
        draft.begin()

        assert draft.state == DraftState.COLLECTING
        assert draft.point_count == 0


class TestDraftCancel:
    """Tests for discarding a draft."""

    @pytest.mark.parametrize("count", [0, 2, 4])
    def test_cancel_discards_points(self, count):
        draft = _filled_draft(count)

        draft.cancel()

        assert draft.state == DraftState.IDLE
        assert draft.points == ()

    def test_cancel_when_idle_is_noop(self):
        draft = PolygonDraft()
        draft.cancel()

        assert draft.state == DraftState.IDLE


# ============================================================
# Pointer Click Tests
# ============================================================

class TestDraftClicks:
    """Tests for placing corners from pointer positions."""

    def test_click_converted_to_percent(self):
        draft = PolygonDraft()
        draft.begin()
        rect = ViewportRect(left=100, top=50, width=1200, height=900)

        assert draft.add_click(400, 275, rect) is True

        point = draft.points[0]
        assert point.x == pytest.approx(25.0)
        assert point.y == pytest.approx(25.0)

    def test_click_outside_image_ignored(self):
        draft = PolygonDraft()
        draft.begin()
        rect = ViewportRect.from_size(800, 600)

        assert draft.add_click(900, 100, rect) is False
        assert draft.add_click(-1, 100, rect) is False
        assert draft.point_count == 0

    def test_click_on_edge_accepted(self):
        draft = PolygonDraft()
        draft.begin()
        rect = ViewportRect.from_size(800, 600)

        assert draft.add_click(800, 600, rect) is True
        assert draft.points[0] == Point(x=100, y=100)

    def test_click_ignored_when_not_collecting(self):
        draft = PolygonDraft()
        rect = ViewportRect.from_size(800, 600)

        assert draft.add_click(10, 10, rect) is False

    def test_four_clicks_make_ready(self):
        draft = PolygonDraft()
        draft.begin()
        rect = ViewportRect.from_size(1200, 900)
        for client_x, client_y in [(120, 90), (480, 90), (420, 360), (180, 405)]:
            draft.add_click(client_x, client_y, rect)

        assert draft.is_ready
        assert draft.points[2].x == pytest.approx(35.0)
        assert draft.points[2].y == pytest.approx(40.0)
