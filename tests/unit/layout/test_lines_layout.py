import pytest

from eposim.layout.lines import (
    begin_vline,
    close_all_vlines,
    end_vline,
    find_open_vline,
    layout_hline,
)
from eposim.model.command import PrintCommand
from eposim.model.geometry import CursorState
from eposim.model.settings import LayoutSettings


@pytest.fixture
def settings() -> LayoutSettings:
    return LayoutSettings()


@pytest.fixture
def cursor() -> CursorState:
    return CursorState()


# === Horizontal lines ===


class TestHorizontalLine:
    def test_default_spans_page(self, cursor: CursorState, settings: LayoutSettings) -> None:
        (element,) = layout_hline(PrintCommand.make("hline"), cursor, settings)
        assert (element.x, element.y, element.width, element.height) == (0, 0, 576, 2)
        assert element.role == "hline"
        assert (cursor.current_x, cursor.current_y) == (0, 2)

    def test_breaks_active_row(self, cursor: CursorState, settings: LayoutSettings) -> None:
        cursor.current_x = 50
        cursor.max_line_height = 48
        (element,) = layout_hline(PrintCommand.make("hline"), cursor, settings)
        assert element.y == 48
        assert cursor.current_y == 50
        assert cursor.current_x == 0
        assert cursor.max_line_height == 24

    @pytest.mark.parametrize(
        "style,advance",
        [
            ("line_thin", 2),
            ("line_medium", 3),
            ("line_thick", 4),
            ("line_thin_double", 4),
            ("line_thick_double", 8),
        ],
    )
    def test_advance_by_style(
        self, cursor: CursorState, settings: LayoutSettings, style: str, advance: int
    ) -> None:
        layout_hline(PrintCommand.make("hline", style=style), cursor, settings)
        assert cursor.current_y == advance

    @pytest.mark.parametrize(
        "attrs,x,width",
        [
            ({"x1": "10", "x2": "20"}, 10, 11),
            ({"x1": "100"}, 100, 476),
            ({"x1": "50", "x2": "10"}, 50, 0),
            ({"x1": "abc", "x2": "9"}, 0, 10),
        ],
    )
    def test_span(
        self, cursor: CursorState, settings: LayoutSettings, attrs: dict, x: int, width: int
    ) -> None:
        (element,) = layout_hline(PrintCommand.make("hline", **attrs), cursor, settings)
        assert (element.x, element.width) == (x, width)

    def test_invisible_still_advances(
        self, cursor: CursorState, settings: LayoutSettings
    ) -> None:
        elements = layout_hline(PrintCommand.make("hline", color="none"), cursor, settings)
        assert len(elements) == 1
        assert elements[0].style["color"] == "none"
        assert cursor.current_y == 2

    def test_double_style_payload(self, cursor: CursorState, settings: LayoutSettings) -> None:
        (element,) = layout_hline(
            PrintCommand.make("hline", style="line_medium_double", color="color_2"),
            cursor,
            settings,
        )
        assert element.style["double"] is True
        assert element.style["thickness"] == 2
        assert element.style["rgb"] == (255, 0, 0)


# === Vertical lines ===


class TestVerticalLines:
    def test_begin_records_open_line(self, cursor: CursorState, settings: LayoutSettings) -> None:
        cursor.current_y = 30
        begin = PrintCommand.make("vline-begin", x="5")
        assert begin_vline(begin, cursor, settings) == []
        (line,) = cursor.active_vertical_lines
        assert (line.x, line.start_y, line.command) == (5, 30, begin)

    def test_pair_spans_to_end_row(self, cursor: CursorState, settings: LayoutSettings) -> None:
        begin = PrintCommand.make("vline-begin", x="5")
        begin_vline(begin, cursor, settings)
        cursor.current_y = 100
        (element,) = end_vline(PrintCommand.make("vline-end", x="5"), cursor, settings)
        assert (element.x, element.y, element.width, element.height) == (5, 0, 1, 100)
        assert element.command is begin
        assert element.role == "vline"
        assert cursor.active_vertical_lines == []

    def test_end_mid_row_includes_row(self, cursor: CursorState, settings: LayoutSettings) -> None:
        begin_vline(PrintCommand.make("vline-begin"), cursor, settings)
        cursor.current_y = 100
        cursor.current_x = 10
        (element,) = end_vline(PrintCommand.make("vline-end"), cursor, settings)
        assert element.height == 124

    def test_same_x_closes_most_recent(
        self, cursor: CursorState, settings: LayoutSettings
    ) -> None:
        outer = PrintCommand.make("vline-begin", x="0")
        inner = PrintCommand.make("vline-begin", x="0")
        begin_vline(outer, cursor, settings)
        cursor.current_y = 50
        begin_vline(inner, cursor, settings)
        cursor.current_y = 100
        (first,) = end_vline(PrintCommand.make("vline-end", x="0"), cursor, settings)
        cursor.current_y = 150
        (second,) = end_vline(PrintCommand.make("vline-end", x="0"), cursor, settings)
        assert (first.command, first.y, first.height) == (inner, 50, 50)
        assert (second.command, second.y, second.height) == (outer, 0, 150)

    def test_matching_by_x(self, cursor: CursorState, settings: LayoutSettings) -> None:
        begin_vline(PrintCommand.make("vline-begin", x="0"), cursor, settings)
        begin_vline(PrintCommand.make("vline-begin", x="100"), cursor, settings)
        end_vline(PrintCommand.make("vline-end", x="0"), cursor, settings)
        assert [line.x for line in cursor.active_vertical_lines] == [100]

    def test_unmatched_end_is_ignored(
        self, cursor: CursorState, settings: LayoutSettings
    ) -> None:
        begin_vline(PrintCommand.make("vline-begin", x="0"), cursor, settings)
        assert end_vline(PrintCommand.make("vline-end", x="7"), cursor, settings) == []
        assert len(cursor.active_vertical_lines) == 1
        assert find_open_vline(cursor, 7) is None
        assert find_open_vline(cursor, 0) == 0

    def test_double_style_width(self, cursor: CursorState, settings: LayoutSettings) -> None:
        begin_vline(PrintCommand.make("vline-begin", style="line_thin_double"), cursor, settings)
        cursor.current_y = 10
        (element,) = end_vline(PrintCommand.make("vline-end"), cursor, settings)
        assert element.width == 3

    def test_close_all_oldest_first(self, cursor: CursorState, settings: LayoutSettings) -> None:
        a = PrintCommand.make("vline-begin", x="0")
        b = PrintCommand.make("vline-begin", x="200")
        begin_vline(a, cursor, settings)
        begin_vline(b, cursor, settings)
        cursor.current_y = 80
        cursor.current_x = 12
        elements = close_all_vlines(cursor)
        assert [e.command for e in elements] == [a, b]
        assert all(e.height == 104 for e in elements)
        assert cursor.active_vertical_lines == []
