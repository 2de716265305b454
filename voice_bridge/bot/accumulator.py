"""
Incremental merging of streamed completion deltas.

Every delta received from the completion stream is a partial message. Merging
them in arrival order rebuilds the complete message: text grows by
concatenation, nested objects merge field by field, and any other value is
kept as first written.

Values are held as tagged variants so each merge rule is a method of the
variant it applies to:

    TextValue      str, appended to by later text
    MappingValue   nested fields, merged recursively
    ScalarValue    anything else (numbers, booleans, lists), write-once
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Union


@dataclass
class TextValue:
    text: str

    def merge(self, incoming: "Value") -> "Value":
        if isinstance(incoming, TextValue):
            self.text += incoming.text
        return self

    def unwrap(self) -> str:
        return self.text


@dataclass
class MappingValue:
    fields: Dict[str, "Value"] = field(default_factory=dict)

    def merge(self, incoming: "Value") -> "Value":
        if isinstance(incoming, MappingValue):
            for name, value in incoming.fields.items():
                existing = self.fields.get(name)
                self.fields[name] = value if existing is None else existing.merge(value)
        return self

    def unwrap(self) -> Dict[str, Any]:
        return {name: value.unwrap() for name, value in self.fields.items()}


@dataclass
class ScalarValue:
    value: Any

    def merge(self, incoming: "Value") -> "Value":
        # Set once; later deltas for the same field are dropped.
        return self

    def unwrap(self) -> Any:
        return self.value


Value = Union[TextValue, MappingValue, ScalarValue]


def to_value(raw: Any) -> Value:
    """Wrap a raw delta value in its variant. None-valued fields are dropped."""
    if isinstance(raw, str):
        return TextValue(raw)
    if isinstance(raw, Mapping):
        return MappingValue(
            {str(name): to_value(item) for name, item in raw.items() if item is not None}
        )
    return ScalarValue(raw)


class AccumulatedMessage:
    """The running merge of all deltas seen in one drafting cycle."""

    def __init__(self):
        self._root = MappingValue()

    def merge(self, delta: Optional[Mapping[str, Any]]) -> "AccumulatedMessage":
        """Merge one delta into this message in place and return it."""
        if delta:
            self._root.merge(to_value(delta))
        return self

    def get(self, *path: str, default: Any = None) -> Any:
        """
        Look up a (nested) field by path, e.g. ``get("tool_calls", "0", "function", "name")``.
        """
        node: Value = self._root
        for name in path:
            if not isinstance(node, MappingValue) or name not in node.fields:
                return default
            node = node.fields[name]
        return node.unwrap()

    def to_dict(self) -> Dict[str, Any]:
        return self._root.unwrap()

    def __bool__(self) -> bool:
        return bool(self._root.fields)

    def __repr__(self) -> str:
        return f"AccumulatedMessage({self.to_dict()!r})"


def merge(previous: AccumulatedMessage, delta: Optional[Mapping[str, Any]]) -> AccumulatedMessage:
    """Merge ``delta`` into ``previous`` and return the updated message."""
    return previous.merge(delta)
