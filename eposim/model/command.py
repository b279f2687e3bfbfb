"""
Модель команды печати (PrintCommand): узел дерева команд.

Print command tree node for the ePOS receipt simulator. A command is a typed node
with a string-keyed attribute map, optional text content and, for containers only,
ordered children. Leaf kinds never look at their children.

Commands compare by identity: the layout output references the node itself, so two
equal-looking commands in one document stay distinguishable for hit testing.

Module: eposim/model/command.py
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Final, Iterator, List, Mapping, Optional

from eposim.model.enums import CommandKind

logger: Final = logging.getLogger(__name__)

_LEADING_INT: Final = re.compile(r"^\s*([+-]?\d+)")


def parse_int(value: Optional[str]) -> Optional[int]:
    """
    Parse the leading integer of an attribute value.

    Mirrors how print documents are read by real devices: ``"12"`` and ``"12px"``
    both give 12, while ``""``, ``"abc"`` or ``None`` give ``None``.
    """
    if value is None:
        return None
    match = _LEADING_INT.match(str(value))
    if match is None:
        return None
    return int(match.group(1))


@dataclass(eq=False)
class PrintCommand:
    """
    One node of the command tree.

    Attributes:
        kind: Command kind (leaf kinds or CONTAINER).
        attributes: Raw attribute values as found in the document.
        text_content: Text payload (text, barcode data, symbol data, raster data).
        children: Child commands, meaningful only for CONTAINER nodes.
        tag: Original tag name, kept for unknown/container nodes.
    """

    kind: CommandKind
    attributes: Dict[str, str] = field(default_factory=dict)
    text_content: str = ""
    children: List["PrintCommand"] = field(default_factory=list)
    tag: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.kind, CommandKind):
            raise TypeError(f"kind must be CommandKind, got {type(self.kind)!r}")
        self.attributes = {str(k): str(v) for k, v in self.attributes.items()}
        if self.tag is None:
            self.tag = self.kind.value
        self.text_content = "" if self.text_content is None else str(self.text_content)

    # ---- attribute access ----

    def attr(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.attributes.get(name, default)

    def has_attr(self, name: str) -> bool:
        return name in self.attributes

    def int_attr(self, name: str, default: Optional[int] = None) -> Optional[int]:
        value = parse_int(self.attributes.get(name))
        return default if value is None else value

    def bool_attr(self, name: str) -> bool:
        return self.attributes.get(name) == "true"

    def set_attr(self, name: str, value: Any) -> None:
        self.attributes[name] = str(value)

    # ---- tree ----

    def add_child(self, child: "PrintCommand") -> "PrintCommand":
        if not isinstance(child, PrintCommand):
            raise TypeError("Expected PrintCommand")
        self.children.append(child)
        return child

    def walk(self) -> Iterator["PrintCommand"]:
        """Depth-first, document-order traversal including this node."""
        yield self
        if self.kind is CommandKind.CONTAINER:
            for child in self.children:
                yield from child.walk()

    # ---- construction helpers ----

    @classmethod
    def make(
        cls, kind: CommandKind | str, text: str = "", **attributes: Any
    ) -> "PrintCommand":
        """
        Build a leaf command from keyword attributes (``x1``, ``linespc``, ...).
        ``None`` values are dropped.

        Example:
            >>> PrintCommand.make("text", "Total", align="right", em="true")
        """
        if isinstance(kind, str):
            kind = CommandKind.from_tag(kind)
        attrs = {k: str(v) for k, v in attributes.items() if v is not None}
        return cls(kind=kind, attributes=attrs, text_content=text)

    @classmethod
    def container(
        cls, *children: "PrintCommand", tag: str = "epos-print"
    ) -> "PrintCommand":
        return cls(kind=CommandKind.CONTAINER, children=list(children), tag=tag)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"tag": self.tag, "attributes": dict(self.attributes)}
        if self.text_content:
            out["text"] = self.text_content
        if self.children:
            out["children"] = [c.to_dict() for c in self.children]
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PrintCommand":
        tag = data.get("tag")
        kind = CommandKind.from_tag(tag)
        node = cls(
            kind=kind,
            attributes=dict(data.get("attributes") or {}),
            text_content=data.get("text") or "",
            tag=tag or kind.value,
        )
        for child in data.get("children") or ():
            node.add_child(cls.from_dict(child))
        if node.children and kind.is_leaf:
            logger.debug("Children of leaf command %r are ignored", tag)
        return node

    def __repr__(self) -> str:
        text = self.text_content[:16] + ("..." if len(self.text_content) > 16 else "")
        return f"<PrintCommand {self.tag} attrs={self.attributes!r} text={text!r}>"


__all__ = ["PrintCommand", "parse_int"]
