"""
Unit tests for merging streamed deltas into an AccumulatedMessage.
"""

import pytest

from voice_bridge.bot.accumulator import (
    AccumulatedMessage,
    MappingValue,
    ScalarValue,
    TextValue,
    merge,
    to_value,
)


class TestToValue:
    """Tests for wrapping raw delta values in variants."""

    def test_string_becomes_text(self):
        assert to_value("hi") == TextValue("hi")

    def test_mapping_becomes_nested_and_drops_none(self):
        value = to_value({"name": "list", "arguments": None})
        assert value == MappingValue({"name": TextValue("list")})

    @pytest.mark.parametrize("raw", [1, 2.5, True, ["a", "b"]])
    def test_other_values_are_scalars(self, raw):
        assert to_value(raw) == ScalarValue(raw)


class TestMerge:
    """Tests for the merge rules."""

    def test_text_fragments_concatenate_in_order(self):
        fragments = ["Hel", "lo", ", ", "wor", "ld", "!"]
        message = AccumulatedMessage()
        for fragment in fragments:
            message.merge({"content": fragment})

        assert message.get("content") == "".join(fragments)

    def test_absent_field_is_set(self):
        message = AccumulatedMessage().merge({"role": "assistant"})
        assert message.to_dict() == {"role": "assistant"}

    def test_none_values_are_ignored(self):
        message = AccumulatedMessage().merge({"content": "Hi"})
        message.merge({"content": None})
        assert message.get("content") == "Hi"

    def test_nested_fields_merge_recursively(self):
        message = AccumulatedMessage()
        message.merge({"function_call": {"name": "se"}})
        message.merge({"function_call": {"name": "arch", "arguments": '{"na'}})
        message.merge({"function_call": {"arguments": 'me": "x"}'}})

        assert message.to_dict() == {
            "function_call": {"name": "search", "arguments": '{"name": "x"}'}
        }

    def test_mapping_onto_text_is_ignored(self):
        message = AccumulatedMessage().merge({"content": "text"})
        before = message.to_dict()

        message.merge({"content": {"nested": "value"}})

        assert message.to_dict() == before

    def test_text_onto_mapping_is_ignored(self):
        message = AccumulatedMessage().merge({"tool_calls": {"0": {"id": "call_1"}}})
        before = message.to_dict()

        message.merge({"tool_calls": "oops"})

        assert message.to_dict() == before

    def test_scalars_are_write_once(self):
        message = AccumulatedMessage().merge({"index": 0})
        message.merge({"index": 5})
        assert message.get("index") == 0

    def test_arrays_are_not_merged(self):
        message = AccumulatedMessage().merge({"items": ["a"]})
        message.merge({"items": ["b"]})
        assert message.get("items") == ["a"]

    def test_tool_call_and_content_accumulate_independently(self):
        message = AccumulatedMessage()
        deltas = [
            {"role": "assistant", "content": "One"},
            {"tool_calls": {"0": {"id": "call_1", "function": {"name": "l", "arguments": ""}}}},
            {"content": " moment"},
            {"tool_calls": {"0": {"function": {"name": "ist", "arguments": '{"genre":'}}}},
            {"tool_calls": {"0": {"function": {"arguments": ' "memoir"}'}}}},
        ]
        for delta in deltas:
            message.merge(delta)

        assert message.get("content") == "One moment"
        assert message.get("tool_calls", "0", "function", "name") == "list"
        assert message.get("tool_calls", "0", "function", "arguments") == '{"genre": "memoir"}'
        assert message.get("tool_calls", "0", "id") == "call_1"

    def test_merge_function_returns_updated_message(self):
        previous = AccumulatedMessage()
        result = merge(previous, {"content": "x"})
        assert result is previous
        assert result.get("content") == "x"

    def test_empty_delta_is_noop(self):
        message = AccumulatedMessage()
        message.merge({})
        message.merge(None)
        assert not message
        assert message.to_dict() == {}


class TestGet:
    def test_missing_path_returns_default(self):
        message = AccumulatedMessage().merge({"content": "x"})
        assert message.get("tool_calls", "0", "function", "name") is None
        assert message.get("content", "nested", default="d") == "d"
