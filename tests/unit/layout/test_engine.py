"""
Модульные тесты для eposim/layout/engine.py
Tests for the flow layout engine: dispatch, skip semantics, end-of-document
flushing, idempotence and concurrent use.
"""

import concurrent.futures
import logging
from typing import List

import pytest

from eposim.layout import CALCULATORS, InvalidCommandError, LayoutEngine, LayoutResult, layout
from eposim.model.command import PrintCommand
from eposim.model.enums import CommandKind
from eposim.model.geometry import CursorState, PositionedElement
from eposim.model.settings import LayoutSettings


def receipt() -> PrintCommand:
    return PrintCommand.container(
        PrintCommand.make("logo", key1="32", key2="32", align="center"),
        PrintCommand.make("text", "STORE #42\n", align="center", dw="true", dh="true"),
        PrintCommand.make("vline-begin", x="0"),
        PrintCommand.make("text", "Coffee x2" + " " * 30 + "7.00\n"),
        PrintCommand.make("text", "中文 receipt\n", lang="zh-cn"),
        PrintCommand.make("hline", style="line_medium_double"),
        PrintCommand.make("vline-end", x="0"),
        PrintCommand.make("barcode", "12345678", type="code128", hri="below", align="center"),
        PrintCommand.make("symbol", "https://example.com/r/42", type="qrcode_model_2"),
        PrintCommand.make("image", "ff00ff00", width="16", height="2", align="right"),
        PrintCommand.make("feed", line="2"),
        PrintCommand.make("cut", type="reserve"),
        PrintCommand.make("text", "Thank you", align="center"),
    )


@pytest.fixture
def engine() -> LayoutEngine:
    return LayoutEngine()


@pytest.fixture
def propagate_logs(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(logging.getLogger("eposim"), "propagate", True)


# === Dispatch ===


def test_every_leaf_kind_has_a_calculator() -> None:
    for kind in CommandKind:
        assert (kind in CALCULATORS) is kind.is_leaf


def test_calculator_table_is_read_only() -> None:
    with pytest.raises(TypeError):
        CALCULATORS[CommandKind.TEXT] = lambda *a: []  # type: ignore[index]


def test_module_level_layout(engine: LayoutEngine) -> None:
    result = layout(PrintCommand.container(PrintCommand.make("text", "Hello")))
    assert isinstance(result, LayoutResult)
    assert len(result) == 1
    assert result.elements[0].width == 60
    assert result.page_width == 576


def test_containers_and_unknown_tags_recurse(engine: LayoutEngine) -> None:
    inner = PrintCommand.container(
        PrintCommand.make("text", "B"), PrintCommand.make("page"), tag="page"
    )
    root = PrintCommand.container(PrintCommand.make("text", "A"), inner, PrintCommand.make("text", "C"))
    result = engine.layout(root)
    assert [e.style["text"] for e in result] == ["A", "B", "C"]
    assert [e.x for e in result] == [0, 12, 24]


def test_leaf_root(engine: LayoutEngine) -> None:
    result = engine.layout(PrintCommand.make("hline"))
    assert [e.role for e in result] == ["hline"]


def test_root_type_checked(engine: LayoutEngine) -> None:
    with pytest.raises(TypeError):
        engine.layout({"tag": "text"})  # type: ignore[arg-type]


@pytest.mark.parametrize("page_width", [0, -10])
def test_invalid_page_width(engine: LayoutEngine, page_width: int) -> None:
    with pytest.raises(ValueError):
        engine.layout(PrintCommand.container(), page_width=page_width)


def test_page_width_override(engine: LayoutEngine) -> None:
    result = engine.layout(PrintCommand.container(PrintCommand.make("hline")), page_width=384)
    assert result.page_width == 384
    assert result.elements[0].width == 384
    assert engine.settings.page_width == 576


# === Content height ===


class TestContentHeight:
    def test_minimum(self, engine: LayoutEngine) -> None:
        assert engine.layout(PrintCommand.container()).content_height == 100

    def test_grows_with_content(self, engine: LayoutEngine) -> None:
        feeds = [PrintCommand.make("feed", unit="50") for _ in range(10)]
        assert engine.layout(PrintCommand.container(*feeds)).content_height == 524

    def test_configured_minimum(self) -> None:
        engine = LayoutEngine(LayoutSettings(min_content_height=0))
        assert engine.layout(PrintCommand.container()).content_height == 24


# === Skipping ===


class TestSkipping:
    @pytest.mark.parametrize(
        "bad",
        [
            PrintCommand.make("barcode", ""),
            PrintCommand.make("symbol", "  "),
            PrintCommand.make("image", "ff", height="2"),
            PrintCommand.make("image", "", width="8", height="2"),
            PrintCommand.make("logo", key1="x", key2="1"),
        ],
        ids=["empty-barcode", "empty-symbol", "image-no-width", "image-no-data", "logo-bad-key"],
    )
    def test_invalid_command_leaves_no_trace(
        self, engine: LayoutEngine, bad: PrintCommand
    ) -> None:
        a = PrintCommand.make("text", "A")
        b = PrintCommand.make("text", "B")
        result = engine.layout(PrintCommand.container(a, bad, b))
        assert [e.command for e in result] == [a, b]
        assert result.elements[1].x == 12

    def test_partial_mutation_rolled_back(self) -> None:
        def half_done(
            command: PrintCommand, cursor: CursorState, settings: LayoutSettings
        ) -> List[PositionedElement]:
            cursor.current_y += 500
            cursor.current_x = 300
            raise InvalidCommandError("gave up", command=command)

        engine = LayoutEngine(calculators={CommandKind.LOGO: half_done})
        result = engine.layout(
            PrintCommand.container(PrintCommand.make("logo"), PrintCommand.make("text", "A"))
        )
        assert (result.elements[0].x, result.elements[0].y) == (0, 0)

    def test_dict_document_with_numeric_payload(self, engine: LayoutEngine) -> None:
        doc = PrintCommand.from_dict(
            {
                "tag": "epos-print",
                "children": [
                    {"tag": "barcode", "text": 12345678},
                    {"tag": "text", "text": "after"},
                ],
            }
        )
        result = engine.layout(doc)
        assert [e.role for e in result] == ["barcode", "text"]
        assert result.elements[0].style["data"] == "12345678"
        assert result.elements[0].width == 330

    def test_unexpected_error_logged_and_skipped(
        self, propagate_logs: None, caplog: pytest.LogCaptureFixture
    ) -> None:
        def broken(
            command: PrintCommand, cursor: CursorState, settings: LayoutSettings
        ) -> List[PositionedElement]:
            raise ZeroDivisionError("boom")

        engine = LayoutEngine(calculators={CommandKind.FEED: broken})
        with caplog.at_level(logging.WARNING, logger="eposim"):
            result = engine.layout(
                PrintCommand.container(PrintCommand.make("feed"), PrintCommand.make("text", "A"))
            )
        assert len(result) == 1
        assert "command skipped" in caplog.text

    def test_invalid_command_logged_at_debug(
        self, propagate_logs: None, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.DEBUG, logger="eposim"):
            layout(PrintCommand.container(PrintCommand.make("barcode", "")))
        assert any(
            r.levelno == logging.DEBUG and "Skipping" in r.getMessage() for r in caplog.records
        )


# === Row resets ===


@pytest.mark.parametrize(
    "breaker",
    [
        PrintCommand.make("feed", unit="10"),
        PrintCommand.make("feed", unit="0"),
        PrintCommand.make("cut"),
        PrintCommand.make("cut", type="no_feed"),
        PrintCommand.make("cut", type="reserve"),
        PrintCommand.make("hline"),
        PrintCommand.make("hline", color="none"),
    ],
    ids=["feed", "zero-feed", "cut", "no-feed-cut", "reserve-cut", "hline", "invisible-hline"],
)
def test_next_text_starts_at_left_edge(engine: LayoutEngine, breaker: PrintCommand) -> None:
    after = PrintCommand.make("text", "B")
    result = engine.layout(PrintCommand.container(PrintCommand.make("text", "A"), breaker, after))
    (element,) = result.segments_for(after)
    assert element.x == 0


def test_invisible_hline_still_advances(engine: LayoutEngine) -> None:
    after = PrintCommand.make("text", "B")
    result = engine.layout(
        PrintCommand.container(
            PrintCommand.make("text", "A"), PrintCommand.make("hline", color="none"), after
        )
    )
    assert result.by_role("hline")[0].style["color"] == "none"
    assert result.segments_for(after)[0].y == 26


# === End of document ===


class TestFlush:
    def test_open_vline_closed_before_reserved_cut(self, engine: LayoutEngine) -> None:
        begin = PrintCommand.make("vline-begin", x="5")
        reserve = PrintCommand.make("cut", type="reserve")
        result = engine.layout(
            PrintCommand.container(begin, PrintCommand.make("text", "A"), reserve)
        )
        assert [e.role for e in result] == ["text", "vline", "cut"]
        vline, cut = result.elements[1], result.elements[2]
        assert vline.command is begin
        assert (vline.x, vline.y, vline.height) == (5, 0, 24)
        assert cut.command is reserve
        assert (cut.y, cut.height) == (24, 52)
        assert result.content_height == 100

    def test_open_vlines_closed_oldest_first(self, engine: LayoutEngine) -> None:
        a = PrintCommand.make("vline-begin", x="0")
        b = PrintCommand.make("vline-begin", x="570")
        result = engine.layout(PrintCommand.container(a, b, PrintCommand.make("feed", unit="40")))
        vlines = result.by_role("vline")
        assert [v.command for v in vlines] == [a, b]
        assert all(v.height == 40 for v in vlines)

    def test_open_vline_mid_row(self, engine: LayoutEngine) -> None:
        result = engine.layout(
            PrintCommand.container(
                PrintCommand.make("vline-begin"),
                PrintCommand.make("text", "AB", dh="true"),
            )
        )
        assert result.by_role("vline")[0].height == 48

    def test_unmatched_end_ignored(self, engine: LayoutEngine) -> None:
        result = engine.layout(PrintCommand.container(PrintCommand.make("vline-end", x="3")))
        assert len(result) == 0


# === Purity ===


class TestPurity:
    def test_idempotent(self, engine: LayoutEngine) -> None:
        doc = receipt()
        first = engine.layout(doc)
        second = engine.layout(doc)
        assert first.elements == second.elements
        assert first.content_height == second.content_height
        assert first.to_dict() == second.to_dict()

    def test_document_not_mutated(self, engine: LayoutEngine) -> None:
        doc = receipt()
        before = doc.to_dict()
        engine.layout(doc)
        assert doc.to_dict() == before

    def test_concurrent_passes_agree(self, engine: LayoutEngine) -> None:
        docs = [receipt() for _ in range(8)]
        expected = [engine.layout(d).to_dict() for d in docs]
        with concurrent.futures.ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(lambda d: engine.layout(d).to_dict(), docs))
        assert results == expected

    def test_layout_many(self, engine: LayoutEngine) -> None:
        docs = [receipt(), PrintCommand.container()]
        results = engine.layout_many(docs, page_width=384)
        assert [r.page_width for r in results] == [384, 384]
        assert len(results[1]) == 0

    def test_receipt_roles(self, engine: LayoutEngine) -> None:
        roles = {e.role for e in engine.layout(receipt())}
        assert roles == {"logo", "text", "vline", "hline", "barcode", "symbol", "image", "feed", "cut"}
