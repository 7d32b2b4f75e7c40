"""Flattening of reasoning payloads of arbitrary shape into plain text.

Gateways report model reasoning in several shapes: a plain string, an object
with a text-like key, a list of such objects or an object nesting any of those
under container keys. The payload is parsed once into a small tree of
`Leaf` and `Container` nodes which is then rendered into a single string.
"""

from dataclasses import dataclass
from typing import Any, Optional, Union

# keys holding text directly, checked in this order
DIRECT_TEXT_KEYS = ("output_text", "text", "reasoning_text", "thought", "thinking")

# keys holding nested reasoning fragments, concatenated in this order
NESTED_KEYS = (
    "content",
    "messages",
    "steps",
    "parts",
    "items",
    "segments",
    "reasoning",
    "details",
)


@dataclass(frozen=True)
class Leaf:
    """Piece of reasoning text."""

    text: str


@dataclass(frozen=True)
class Container:
    """Ordered group of reasoning fragments."""

    children: tuple["ReasoningNode", ...]


ReasoningNode = Union[Leaf, Container]


def parse_reasoning(
    payload: Any, visited: Optional[set[int]] = None
) -> Optional[ReasoningNode]:
    """Parse an untrusted reasoning payload into a reasoning tree.

    Containers already seen (by identity) are skipped, so self-referential
    payloads terminate. Returns None when no text can be found.
    """
    if not payload:
        return None
    if isinstance(payload, str):
        return Leaf(payload)
    if not isinstance(payload, (dict, list)):
        return None

    if visited is None:
        visited = set()
    if id(payload) in visited:
        return None
    visited.add(id(payload))

    if isinstance(payload, list):
        return _container(parse_reasoning(item, visited) for item in payload)

    for key in DIRECT_TEXT_KEYS:
        value = payload.get(key)
        if isinstance(value, str) and value.strip():
            return Leaf(value)

    nested = _container(parse_reasoning(payload.get(key), visited) for key in NESTED_KEYS)
    if nested is not None:
        return nested

    # generic scan, first value yielding text wins
    for value in payload.values():
        node = parse_reasoning(value, visited)
        if node is not None:
            return node
    return None


def _container(nodes: Any) -> Optional[ReasoningNode]:
    children = tuple(node for node in nodes if node is not None)
    if not children:
        return None
    return Container(children)


def render(node: ReasoningNode) -> str:
    """Concatenate the text leaves of a reasoning tree depth-first."""
    if isinstance(node, Leaf):
        return node.text
    return "".join(render(child) for child in node.children)


def extract_reasoning_text(payload: Any) -> Optional[str]:
    """Return the reasoning text carried by the payload, None when absent."""
    node = parse_reasoning(payload)
    if node is None:
        return None
    return render(node)
