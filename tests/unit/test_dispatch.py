"""ComponentDispatcher obligations, fallbacks and degradation."""

import pytest

from agent_components import (
    ChartObligation,
    ComponentDescriptor,
    ComponentDispatcher,
    FileObligation,
    FrozenConfig,
    ImageLayout,
    ImageObligation,
    ImageRecord,
    InMemoryReporter,
    TableObligation,
    TelemetryContext,
    UnknownObligation,
    format_file_size,
    resolve_render_obligation,
)
import agent_components.telemetry as telemetry_module

pytestmark = pytest.mark.unit


def dispatch(type_: str, data: object) -> object:
    return resolve_render_obligation(ComponentDescriptor(type=type_, data=data))


class TestChart:
    def test_wrapped_option(self):
        option = {"series": [{"type": "line", "data": [1, 2]}]}
        obligation = dispatch("chart", {"option": option})
        assert isinstance(obligation, ChartObligation)
        assert obligation.option == option
        assert obligation.violations == ()

    def test_bare_option_object(self):
        obligation = dispatch("chart", {"xAxis": {}, "series": []})
        assert obligation.option == {"xAxis": {}, "series": []}

    def test_non_object_data_is_delegated(self):
        obligation = dispatch("chart", [1, 2, 3])
        assert obligation.option is None
        assert obligation.data == [1, 2, 3]
        assert obligation.violations


class TestTable:
    def test_headers_and_rows(self):
        obligation = dispatch("table", {"headers": ["a", "b"], "rows": [[1, 2], [3, 4]]})
        assert obligation == TableObligation(
            headers=("a", "b"), rows=((1, 2), (3, 4))
        )

    def test_missing_fields_degrade_to_empty(self):
        obligation = dispatch("table", {"rows": [[1]]})
        assert obligation.headers == ()
        assert obligation.rows == ((1,),)
        assert [v.message for v in obligation.violations] == [
            "Table is missing 'headers'"
        ]

    def test_non_mapping_data(self):
        obligation = dispatch("table", None)
        assert obligation.headers == ()
        assert obligation.rows == ()
        assert len(obligation.violations) == 2

    def test_bad_rows_are_dropped(self):
        obligation = dispatch("table", {"headers": ["a"], "rows": [[1], "oops"]})
        assert obligation.rows == ((1,),)
        assert obligation.violations[0].message == "Table row 1 is not a sequence"


class TestImage:
    def test_single_record_without_images_array(self):
        obligation = dispatch("image", {"url": "u"})
        assert isinstance(obligation, ImageObligation)
        assert obligation.images == (ImageRecord(url="u"),)
        assert obligation.layout is ImageLayout.SINGLE

    def test_single_record_keeps_alt_and_caption(self):
        obligation = dispatch("image", {"url": "u", "alt": "A", "caption": "C"})
        assert obligation.images[0] == ImageRecord(url="u", alt="A", caption="C")
        assert obligation.caption is None

    def test_multiple_images_default_to_grid(self):
        obligation = dispatch(
            "image", {"images": [{"url": "1"}, {"url": "2"}], "caption": "set"}
        )
        assert obligation.layout is ImageLayout.GRID
        assert obligation.caption == "set"
        assert obligation.grid_columns == 2

    def test_carousel_request(self):
        obligation = dispatch(
            "image", {"images": [{"url": "1"}, {"url": "2"}], "layout": "carousel"}
        )
        assert obligation.layout is ImageLayout.CAROUSEL

    @pytest.mark.parametrize("layout", ["carousel", "grid"])
    def test_single_image_overrides_requested_layout(self, layout):
        obligation = dispatch("image", {"images": [{"url": "1"}], "layout": layout})
        assert obligation.layout is ImageLayout.SINGLE

    def test_unknown_layout_falls_back_to_configured_default(self):
        dispatcher = ComponentDispatcher(FrozenConfig(default_image_layout="carousel"))
        obligation = dispatcher.resolve_render_obligation(
            ComponentDescriptor(
                type="image",
                data={"images": [{"url": "1"}, {"url": "2"}], "layout": "mosaic"},
            )
        )
        assert obligation.layout is ImageLayout.CAROUSEL
        assert obligation.violations

    @pytest.mark.parametrize(
        "data", [{}, {"images": []}, {"images": [{"alt": "no url"}]}, None, "u"]
    )
    def test_no_images_means_no_obligation(self, data):
        assert dispatch("image", data) is None

    def test_records_without_url_are_dropped(self):
        obligation = dispatch("image", {"images": [{"url": "1"}, {"alt": "x"}]})
        assert obligation.images == (ImageRecord(url="1"),)
        assert obligation.layout is ImageLayout.SINGLE

    @pytest.mark.parametrize(
        ("count", "columns"), [(2, 2), (3, 3), (4, 2), (5, 3), (9, 3)]
    )
    def test_grid_columns(self, count, columns):
        images = [{"url": str(i)} for i in range(count)]
        assert dispatch("image", {"images": images}).grid_columns == columns


class TestFile:
    def test_full_record(self):
        obligation = dispatch("file", {"name": "report.pdf", "size": 2048, "url": "/r"})
        assert obligation == FileObligation(name="report.pdf", size=2048, url="/r")
        assert obligation.display_size == "2.0 KB"

    def test_missing_name(self):
        obligation = dispatch("file", {"size": 10})
        assert obligation.name == ""
        assert obligation.violations[0].message == "File is missing 'name'"

    def test_invalid_size_is_ignored(self):
        obligation = dispatch("file", {"name": "a", "size": "big"})
        assert obligation.size is None
        assert obligation.display_size is None


class TestUnknown:
    def test_unknown_type_carries_descriptor(self):
        descriptor = ComponentDescriptor(type="bogus", data={})
        obligation = resolve_render_obligation(descriptor)
        assert obligation == UnknownObligation(descriptor=descriptor)
        assert obligation.describe().startswith("Unknown component type: bogus")

    def test_custom_type_is_unknown(self):
        assert isinstance(dispatch("custom", {"a": 1}), UnknownObligation)

    def test_handler_errors_become_unknown(self, caplog):
        class Exploding(dict):
            def get(self, *args, **kwargs):
                raise RuntimeError("bad mapping")

        descriptor = ComponentDescriptor(type="file", data=Exploding())
        with caplog.at_level("ERROR"):
            obligation = resolve_render_obligation(descriptor)
        assert isinstance(obligation, UnknownObligation)
        assert "bad mapping" in obligation.violations[0].message


class TestDescriptorInput:
    """Dispatch accepts the descriptor JSON shape and never raises."""

    def test_json_shape_is_normalized(self):
        obligation = resolve_render_obligation({"type": "bogus", "data": {}})
        assert obligation == UnknownObligation(
            descriptor=ComponentDescriptor(type="bogus", data={})
        )

    def test_json_shape_with_known_type(self):
        obligation = resolve_render_obligation(
            {"type": "file", "data": {"name": "a.txt"}, "metadata": {"m": 1}}
        )
        assert obligation == FileObligation(name="a.txt")

    @pytest.mark.parametrize(
        "raw", [{"data": {}}, {"type": None, "data": {"x": 1}}, {"type": 3}]
    )
    def test_malformed_json_shape(self, raw):
        obligation = resolve_render_obligation(raw)
        assert isinstance(obligation, UnknownObligation)
        assert obligation.descriptor.type == ""
        assert obligation.violations[0].message.startswith(
            "Malformed component descriptor"
        )

    @pytest.mark.parametrize("raw", [None, "chart", 42, ["chart"]])
    def test_non_descriptor_input(self, raw):
        obligation = resolve_render_obligation(raw)
        assert isinstance(obligation, UnknownObligation)
        assert obligation.descriptor.data == raw
        assert obligation.violations[0].message == "Not a component descriptor"


class TestDispatchTelemetry:
    @pytest.fixture(autouse=True)
    def _enable_telemetry(self, monkeypatch):
        monkeypatch.setattr(telemetry_module, "_TELEMETRY_ENABLED", True)

    def test_counts_obligation_kinds(self):
        reporter = InMemoryReporter()
        dispatcher = ComponentDispatcher(telemetry=TelemetryContext(reporter))

        dispatcher.resolve_render_obligation(ComponentDescriptor(type="table", data={}))
        dispatcher.resolve_render_obligation(ComponentDescriptor(type="table", data={}))
        dispatcher.resolve_render_obligation(ComponentDescriptor(type="image", data={}))
        dispatcher.resolve_render_obligation({"type": "bogus", "data": None})

        assert len(reporter.timings["dispatch"]) == 4
        assert len(reporter.metrics["dispatch.table"]) == 2
        assert len(reporter.metrics["dispatch.empty"]) == 1
        assert len(reporter.metrics["dispatch.unknown"]) == 1


@pytest.mark.parametrize(
    ("size", "expected"),
    [(0, "0 B"), (1023, "1023 B"), (1024, "1.0 KB"), (1536, "1.5 KB"),
     (1024 * 1024, "1.0 MB"), (5 * 1024 * 1024 + 1, "5.0 MB")],
)
def test_format_file_size(size, expected):
    assert format_file_size(size) == expected
