"""Precedence and fallback behavior of ComponentConfigExtractor."""

from types import SimpleNamespace

import pytest

from agent_components import (
    ComponentConfigExtractor,
    ComponentDescriptor,
    FrozenConfig,
    StrategySpec,
    extract_component,
)

pytestmark = pytest.mark.unit

CHART_FENCE = '```chart\n{"series": [1, 2]}\n```'


class TestPrecedence:
    """The first strategy that finds something wins."""

    def test_nested_descriptor_is_returned_unchanged(self, make_message):
        component = {
            "type": "image",
            "data": {"url": "https://example.com/a.png"},
            "metadata": {"source": "agent"},
        }
        message = make_message(
            content=CHART_FENCE,
            additional_kwargs={"component": component, "type": "table", "data": {}},
            tool_calls=[{"name": "render_chart", "args": {"x": 1}, "id": "abc"}],
        )

        descriptor = extract_component(message)

        assert descriptor is not None
        assert descriptor.to_dict() == component

    def test_nested_descriptor_with_unknown_type_is_kept(self, make_message):
        message = make_message(
            additional_kwargs={"component": {"type": "bogus", "data": {}}}
        )
        descriptor = extract_component(message)
        assert descriptor == ComponentDescriptor(type="bogus", data={})

    def test_nested_descriptor_with_non_string_type_is_skipped(self, make_message):
        message = make_message(
            additional_kwargs={
                "component": {"type": None, "data": {"x": 1}},
                "type": "file",
                "data": {"name": "a.txt"},
            }
        )
        descriptor = extract_component(message)
        assert descriptor == ComponentDescriptor(type="file", data={"name": "a.txt"})

    def test_flat_pair_beats_fenced_marker(self, make_message):
        message = make_message(
            content=CHART_FENCE,
            additional_kwargs={"type": "table", "data": {"headers": ["h"], "rows": []}},
        )

        descriptor = extract_component(message)

        assert descriptor == ComponentDescriptor(
            type="table", data={"headers": ["h"], "rows": []}
        )
        assert descriptor.metadata is None

    def test_flat_pair_beats_tool_call(self, make_message):
        message = make_message(
            additional_kwargs={"type": "file", "data": {"name": "a.txt"}},
            tool_calls=[{"name": "render_chart", "args": {"x": 1}, "id": "abc"}],
        )
        assert extract_component(message).type == "file"

    def test_tool_call_yields_chart_with_call_id(self, make_message):
        message = make_message(
            tool_calls=[{"name": "render_chart", "args": {"x": 1}, "id": "abc"}]
        )

        descriptor = extract_component(message)

        assert descriptor.to_dict() == {
            "type": "chart",
            "data": {"x": 1},
            "metadata": {"tool_call_id": "abc"},
        }

    def test_tool_call_uses_first_recognized_invocation(self, make_message):
        message = make_message(
            tool_calls=[
                {"name": "search", "args": {"q": "x"}, "id": "1"},
                {"name": "create_visualization", "args": {"v": 2}, "id": "2"},
                {"name": "render_chart", "args": {"v": 3}, "id": "3"},
            ]
        )

        descriptor = extract_component(message)

        assert descriptor.data == {"v": 2}
        assert descriptor.metadata["tool_call_id"] == "2"

    def test_tool_call_beats_fenced_marker(self, make_message):
        message = make_message(
            content=CHART_FENCE,
            tool_calls=[{"name": "render_chart", "args": {"x": 1}, "id": "abc"}],
        )
        assert extract_component(message).data == {"x": 1}


class TestFencedMarkers:
    """Text content scanning."""

    def test_table_marker(self, make_message):
        message = make_message(
            content='Here:\n```table\n{"headers":["a"],"rows":[[1]]}\n```\nDone'
        )

        descriptor = extract_component(message)

        assert descriptor == ComponentDescriptor(
            type="table", data={"headers": ["a"], "rows": [[1]]}
        )

    def test_invalid_chart_json_yields_none(self, make_message, caplog):
        message = make_message(content="```chart\n{not valid json\n```")

        with caplog.at_level("WARNING"):
            assert extract_component(message) is None

        assert "Failed to parse chart data" in caplog.text

    def test_invalid_chart_falls_through_to_table(self, make_message):
        content = (
            "```chart\n{broken\n```\n"
            '```table\n{"headers": ["k"], "rows": [["v"]]}\n```'
        )
        descriptor = extract_component(make_message(content=content))
        assert descriptor.type == "table"

    def test_deeply_nested_chart_falls_through_to_table(self, make_message, caplog):
        content = (
            "```chart\n" + "[" * 200_000 + "\n```\n"
            '```table\n{"headers": ["a"], "rows": [[1]]}\n```'
        )
        extractor = ComponentConfigExtractor()

        with caplog.at_level("WARNING"):
            outcome = extractor.explain(make_message(content=content))

        assert outcome.descriptor == ComponentDescriptor(
            type="table", data={"headers": ["a"], "rows": [[1]]}
        )
        assert outcome.diagnostics.strategy_errors == {}
        assert "Failed to parse chart data" in caplog.text

    def test_only_first_chart_block_is_considered(self, make_message):
        content = '```chart\n{"n": 1}\n```\n\n```chart\n{"n": 2}\n```'
        descriptor = extract_component(make_message(content=content))
        assert descriptor.data == {"n": 1}

    def test_chart_wins_over_earlier_table(self, make_message):
        content = (
            '```table\n{"headers": [], "rows": []}\n```\n'
            '```chart\n{"n": 1}\n```'
        )
        assert extract_component(make_message(content=content)).type == "chart"

    def test_non_string_content_is_ignored(self, make_message):
        message = make_message(content=[{"type": "text", "text": CHART_FENCE}])
        assert extract_component(message) is None


class TestNoDescriptor:
    """Messages without any component signal."""

    @pytest.mark.parametrize(
        "message",
        [
            {},
            {"content": "plain text"},
            {"content": None},
            {"additional_kwargs": {"type": "chart"}},
            {"additional_kwargs": {"type": "", "data": {"x": 1}}},
            {"additional_kwargs": {"component": "not a descriptor"}},
            {"additional_kwargs": {"component": {"type": 7, "data": {}}}},
            {"tool_calls": [{"name": "search", "args": {}, "id": "1"}]},
            {"tool_calls": [{"name": "render_chart", "id": "1"}]},
            {"tool_calls": "garbage"},
        ],
    )
    def test_returns_none(self, message):
        assert extract_component(message) is None


class TestMessageShapes:
    """Extraction reads attribute-style message objects too."""

    def test_attribute_message(self):
        message = SimpleNamespace(
            content="",
            additional_kwargs={},
            tool_calls=[{"name": "render_chart", "args": {"x": 1}, "id": "abc"}],
        )
        assert extract_component(message).metadata == {"tool_call_id": "abc"}

    def test_message_is_not_mutated(self, make_message):
        component = {"type": "chart", "data": {"option": {"series": []}}}
        message = make_message(additional_kwargs={"component": component})

        descriptor = extract_component(message)
        descriptor.data["option"]["series"].append(1)

        assert component == {"type": "chart", "data": {"option": {"series": []}}}

    def test_extraction_is_deterministic(self, make_message):
        message = make_message(content='```chart\n{"a": [1, {"b": 2}]}\n```')
        assert extract_component(message) == extract_component(message)


class TestConfiguration:
    """Configured keys and tool names drive the strategies."""

    def test_custom_component_key_and_tool_names(self, make_message):
        config = FrozenConfig(
            component_key="ui",
            chart_tool_names=("plot",),
            tool_call_id_key="call",
        )
        extractor = ComponentConfigExtractor(config)

        nested = make_message(additional_kwargs={"ui": {"type": "file", "data": {}}})
        call = make_message(tool_calls=[{"name": "plot", "args": {}, "id": "9"}])
        default_name = make_message(
            tool_calls=[{"name": "render_chart", "args": {}, "id": "9"}]
        )

        assert extractor.extract(nested).type == "file"
        assert extractor.extract(call).metadata == {"call": "9"}
        assert extractor.extract(default_name) is None

    def test_oversized_text_is_truncated(self, make_message):
        extractor = ComponentConfigExtractor(FrozenConfig(max_text_size=10))
        message = make_message(content="x" * 20 + '```chart\n{"a": 1}\n```')

        outcome = extractor.explain(message)

        assert outcome.descriptor is None
        assert "truncated_input" in outcome.diagnostics.flags


class TestDiagnosticsAndFailures:
    """Strategy errors are recorded, never raised."""

    def test_explain_reports_attempts(self, make_message):
        extractor = ComponentConfigExtractor()
        message = make_message(content='```chart\n{"a": 1}\n```')

        outcome = extractor.explain(message)

        assert outcome.descriptor.type == "chart"
        diagnostics = outcome.diagnostics
        assert diagnostics.attempted_strategies == ["fenced_marker"]
        assert diagnostics.skipped_strategies == [
            "direct_descriptor",
            "flat_type_data",
            "tool_call",
        ]
        assert diagnostics.successful_strategy == "fenced_marker"
        assert diagnostics.to_dict()["flags"] == []

    def test_failing_strategy_is_skipped(self, make_message, caplog):
        def boom(message, config):
            raise RuntimeError("strategy exploded")

        strategies = [
            StrategySpec("exploding", lambda m: True, boom, priority=100),
            StrategySpec(
                "fallback",
                lambda m: True,
                lambda m, c: ComponentDescriptor(type="custom", data=None),
            ),
        ]
        extractor = ComponentConfigExtractor(strategies=strategies)

        with caplog.at_level("ERROR"):
            outcome = extractor.explain(make_message())

        assert outcome.descriptor.type == "custom"
        assert outcome.diagnostics.strategy_errors == {"exploding": "strategy exploded"}
        assert "strategy exploded" in caplog.text

    def test_strategies_sorted_by_priority_then_name(self):
        def never(message, config):
            return None

        extractor = ComponentConfigExtractor(
            strategies=[
                StrategySpec("b", lambda m: True, never, priority=1),
                StrategySpec("a", lambda m: True, never, priority=1),
                StrategySpec("z", lambda m: True, never, priority=5),
            ]
        )
        assert [s.name for s in extractor.strategies] == ["z", "a", "b"]

    def test_strategy_spec_requires_name(self):
        with pytest.raises(ValueError, match="non-empty"):
            StrategySpec(" ", lambda m: True, lambda m, c: None)
