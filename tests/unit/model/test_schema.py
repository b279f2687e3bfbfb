import pytest

from eposim.model.command import PrintCommand
from eposim.model.enums import CommandKind
from eposim.model.schema import (
    ALLOWED_ATTRIBUTES,
    NumericInfo,
    ValidationError,
    attribute_options,
    describe,
    numeric_info,
    validate_command,
    validate_tree,
)


def test_every_leaf_kind_has_an_attribute_list() -> None:
    for kind in CommandKind:
        if kind.is_leaf:
            assert kind in ALLOWED_ATTRIBUTES


def test_valid_text_passes() -> None:
    cmd = PrintCommand.make("text", "A", font="font_b", align="centre", dw="true", width="2", lang="ja")
    result = validate_command(cmd)
    assert result.ok, result.messages()


def test_unknown_attribute() -> None:
    result = validate_command(PrintCommand.make("hline", foo="1"))
    assert not result.ok
    assert isinstance(result.errors[0], ValidationError)
    assert result.errors[0].attribute == "foo"


@pytest.mark.parametrize(
    "kind,attrs",
    [
        ("text", {"color": "purple"}),
        ("cut", {"type": "bogus"}),
        ("symbol", {"level": "level_x"}),
        ("barcode", {"type": "qrcode"}),
        ("text", {"dw": "yes"}),
    ],
)
def test_unknown_keyword(kind: str, attrs: dict) -> None:
    result = validate_command(PrintCommand.make(kind, "1", **attrs))
    assert len(result.errors) == 1
    assert "unknown value" in str(result.errors[0])


@pytest.mark.parametrize(
    "kind,attrs,fragment",
    [
        ("barcode", {"width": "abc"}, "not a number"),
        ("barcode", {"width": "9"}, "outside"),
        ("text", {"height": "0"}, "outside"),
        ("hline", {"x2": "600"}, "outside"),
        ("feed", {"unit": "300"}, "outside"),
    ],
)
def test_numeric_problems(kind: str, attrs: dict, fragment: str) -> None:
    result = validate_command(PrintCommand.make(kind, "1", **attrs))
    assert len(result.errors) == 1
    assert fragment in str(result.errors[0])


def test_page_width_bounds_coordinates() -> None:
    cmd = PrintCommand.make("hline", x2="600")
    assert validate_command(cmd, page_width=640).ok
    assert numeric_info("x", CommandKind.TEXT, 384) == NumericInfo(0, 384)


def test_symbol_types_accepted() -> None:
    for symbol_type in ("aztec", "pdf417", "datamatrix", "qrcode_model_1"):
        assert validate_command(PrintCommand.make("symbol", "x", type=symbol_type)).ok


def test_containers_always_pass() -> None:
    root = PrintCommand.container()
    root.set_attr("xmlns", "http://www.epson-pos.com/schemas/2011/03/epos-print")
    assert validate_command(root).ok


def test_validate_tree_collects_from_all_levels() -> None:
    root = PrintCommand.container(
        PrintCommand.make("text", "ok"),
        PrintCommand.container(PrintCommand.make("feed", unit="abc"), tag="page"),
        PrintCommand.make("logo", key1="1", key2="2", color="color_2"),
    )
    result = validate_tree(root)
    assert len(result.errors) == 2
    assert {e.attribute for e in result.errors} == {"unit", "color"}


def test_attribute_options_kind_specific() -> None:
    assert "code128" in attribute_options("type", CommandKind.BARCODE)
    assert "reserve" in attribute_options("type", CommandKind.CUT)
    assert attribute_options("type", CommandKind.TEXT) is None
    assert attribute_options("x", CommandKind.TEXT) is None


def test_numeric_info_per_kind() -> None:
    assert numeric_info("width", CommandKind.TEXT) == NumericInfo(1, 8, default=1)
    assert numeric_info("width", CommandKind.BARCODE).default == 3
    assert numeric_info("height", CommandKind.BARCODE).max == 255
    assert numeric_info("key1", CommandKind.LOGO) == NumericInfo(0, 255)
    assert numeric_info("font", CommandKind.TEXT) is None


def test_describe_logo() -> None:
    panel = describe(CommandKind.LOGO)
    assert set(panel) == {"key1", "key2", "align"}
    assert panel["align"] == ("left", "center", "right")
