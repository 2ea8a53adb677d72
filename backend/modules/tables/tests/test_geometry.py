import pytest

from modules.tables.services.geometry import (
    EDGE_MARGIN, FloorBounds, Rect, find_overlaps, rectangles_overlap,
    validate_placement
)


FLOOR = FloorBounds(width=20, height=15)


class TestValidatePlacement:

    def test_table_at_left_edge_violates_margin(self):
        violations = validate_placement(Rect(0, 5, 3, 3), FLOOR, margin=2)
        assert [v.edge for v in violations] == ["left"]

    def test_table_at_margin_is_compliant(self):
        assert validate_placement(Rect(2, 2, 3, 3), FLOOR, margin=2) == []

    @pytest.mark.parametrize("x", range(0, EDGE_MARGIN))
    def test_any_x_inside_margin_violates(self, x):
        violations = validate_placement(Rect(x, 5, 3, 3), FLOOR)
        assert any(v.edge == "left" for v in violations)

    @pytest.mark.parametrize("x", range(EDGE_MARGIN, 20 - EDGE_MARGIN - 3 + 1))
    def test_any_x_that_fits_is_compliant(self, x):
        assert validate_placement(Rect(x, 5, 3, 3), FLOOR) == []

    def test_right_and_bottom_edges(self):
        # right = 19 > 18, bottom = 14 > 13
        violations = validate_placement(Rect(16, 11, 3, 3), FLOOR)
        assert {v.edge for v in violations} == {"right", "bottom"}

    def test_flush_with_far_margin_is_compliant(self):
        assert validate_placement(Rect(15, 10, 3, 3), FLOOR) == []

    def test_table_wider_than_floor_reports_every_edge(self):
        violations = validate_placement(Rect(0, 0, 30, 30), FLOOR)
        assert {v.edge for v in violations} == {"left", "top", "right", "bottom"}

    def test_violation_message_names_margin(self):
        violations = validate_placement(Rect(2, 0, 3, 3), FLOOR, margin=2)
        assert "2 units" in violations[0].message


class TestOverlap:

    def test_overlapping_rectangles(self):
        assert rectangles_overlap(Rect(2, 2, 3, 3), Rect(4, 4, 3, 3))

    def test_touching_edges_do_not_overlap(self):
        assert not rectangles_overlap(Rect(2, 2, 3, 3), Rect(5, 2, 3, 3))
        assert not rectangles_overlap(Rect(2, 2, 3, 3), Rect(2, 5, 3, 3))

    def test_separate_rectangles(self):
        assert not rectangles_overlap(Rect(2, 2, 3, 3), Rect(8, 8, 3, 3))

    def test_contained_rectangle_overlaps(self):
        assert rectangles_overlap(Rect(2, 2, 10, 10), Rect(4, 4, 1, 1))

    def test_find_overlaps_returns_index_pairs(self):
        rects = [Rect(2, 2, 3, 3), Rect(10, 2, 3, 3), Rect(3, 3, 3, 3)]
        assert find_overlaps(rects) == [(0, 2)]

    def test_find_overlaps_empty(self):
        assert find_overlaps([]) == []
