"""Tests for the end-to-end validation pipeline."""

from pathlib import PurePath

import pytest

from plugin_schema.models import (
    DOCUMENT_START,
    Diagnostic,
    Document,
    EnumParams,
    FailureKind,
    Range,
    SchemaKind,
    Severity,
    ValidationFailure,
)
from plugin_schema.validation import ValidationPipeline, project_root_for, schema_kind_for_path

from .conftest import VALID_MANIFEST, VALID_PROVIDER, VALID_TOOL, line_of


class RecordingValidator:
    def __init__(self, failures=()):
        self.failures = list(failures)
        self.calls = []

    def validate(self, value):
        self.calls.append(value)
        return list(self.failures)


class RaisingValidator:
    def validate(self, value):
        raise RuntimeError("boom")


def _manifest(text):
    return Document("file:///plugin/manifest.yaml", text, 1)


def _messages(diagnostics):
    return [d.message for d in diagnostics]


@pytest.mark.parametrize(
    "text, kind",
    [
        (VALID_MANIFEST, SchemaKind.MANIFEST),
        (VALID_TOOL, SchemaKind.TOOL),
        (VALID_PROVIDER, SchemaKind.PROVIDER),
    ],
)
def test_valid_documents_have_no_diagnostics(pipeline, text, kind):
    assert pipeline.run(Document("file:///doc.yaml", text), kind) == []


def test_missing_top_level_properties_in_required_order(pipeline):
    diagnostics = pipeline.run(_manifest("type: plugin\nauthor: a\nname: n\n"), SchemaKind.MANIFEST)

    assert _messages(diagnostics) == [
        "Missing required property: 'version'",
        "Missing required property: 'label'",
        "Missing required property: 'description'",
        "Missing required property: 'icon'",
        "Missing required property: 'resource'",
        "Missing required property: 'meta'",
    ]
    assert all(d.range == DOCUMENT_START for d in diagnostics)
    assert all(d.severity == Severity.ERROR for d in diagnostics)


def test_invalid_type_value(pipeline):
    text = VALID_MANIFEST.replace("type: plugin", "type: app")

    assert pipeline.run(_manifest(text), SchemaKind.MANIFEST) == [
        Diagnostic(Range.from_coords(1, 0, 1, 4), "'type' should be one of: plugin", Severity.ERROR)
    ]


def test_nested_enum_ranges_the_innermost_key(pipeline):
    text = VALID_MANIFEST.replace("language: python", "language: ruby")
    line = line_of(text, "    language: ruby")

    assert pipeline.run(_manifest(text), SchemaKind.MANIFEST) == [
        Diagnostic(Range.from_coords(line, 4, line, 12), "'meta.runner.language' should be one of: python")
    ]


def test_missing_nested_property_ranges_the_parent_key(pipeline):
    text = VALID_MANIFEST.replace("    entrypoint: main\n", "")
    line = line_of(text, "  runner:")

    assert pipeline.run(_manifest(text), SchemaKind.MANIFEST) == [
        Diagnostic(Range.from_coords(line, 2, line, 8), "Missing required property: 'entrypoint'")
    ]


def test_invalid_list_item_ranges_its_marker(pipeline):
    text = VALID_MANIFEST.replace("    - arm64", "    - x86")
    line = line_of(text, "    - x86")

    assert pipeline.run(_manifest(text), SchemaKind.MANIFEST) == [
        Diagnostic(Range.from_coords(line, 4, line, 5), "'meta.arch.1' should be one of: amd64, arm64")
    ]


def test_wrong_scalar_type(pipeline):
    text = VALID_MANIFEST.replace("memory: 268435456", "memory: lots")
    line = line_of(text, "  memory: lots")

    assert pipeline.run(_manifest(text), SchemaKind.MANIFEST) == [
        Diagnostic(Range.from_coords(line, 2, line, 8), "'resource.memory' should be integer")
    ]


def test_numeric_limits(pipeline):
    text = VALID_MANIFEST.replace("memory: 268435456", "memory: 1024").replace(
        "size: 1048576", "size: 2147483648"
    )
    size_line = line_of(text, "      size: 2147483648")

    diagnostics = pipeline.run(_manifest(text), SchemaKind.MANIFEST)

    assert _messages(diagnostics) == [
        "'resource.memory' should be >= 1048576",
        "'resource.permission.storage.size' should be <= 1073741824",
    ]
    assert diagnostics[1].range == Range.from_coords(size_line, 6, size_line, 10)


def test_pattern_and_format(pipeline):
    text = VALID_MANIFEST.replace("name: weather_tool", "name: Weather Tool").replace(
        "created_at: 2024-09-20T08:03:44.658609186Z", "created_at: yesterday"
    )
    created_line = line_of(text, "created_at: yesterday")

    diagnostics = pipeline.run(_manifest(text), SchemaKind.MANIFEST)

    assert diagnostics == [
        Diagnostic(Range.from_coords(3, 0, 3, 4), "'name' should match pattern: ^[a-z0-9_-]{1,128}$"),
        Diagnostic(Range.from_coords(created_line, 0, created_line, 10), "'created_at' should be a valid date-time"),
    ]


def test_empty_label(pipeline):
    text = VALID_MANIFEST.replace("label:\n  en_US: Weather\n  zh_Hans: 天气\n", "label: {}\n")

    assert pipeline.run(_manifest(text), SchemaKind.MANIFEST) == [
        Diagnostic(Range.from_coords(4, 0, 4, 5), "'label' should have at least 1 properties")
    ]


def test_unexpected_meta_property(pipeline):
    text = VALID_MANIFEST.replace("    entrypoint: main\n", "    entrypoint: main\n  extra_field: 1\n")
    line = line_of(text, "  extra_field: 1")

    assert pipeline.run(_manifest(text), SchemaKind.MANIFEST) == [
        Diagnostic(Range.from_coords(line, 2, line, 13), "'meta' has unexpected property: 'extra_field'")
    ]


def test_tool_parameter_enum(pipeline):
    text = VALID_TOOL.replace("form: llm", "form: manual")
    line = line_of(text, "    form: manual")

    assert pipeline.run(Document("file:///p/tools/search.yaml", text), SchemaKind.TOOL) == [
        Diagnostic(Range.from_coords(line, 4, line, 8), "'parameters.0.form' should be one of: llm, form")
    ]


def test_flow_list_item_enum(pipeline):
    text = VALID_MANIFEST.replace("  arch:\n    - amd64\n    - arm64\n", "  arch: [amd64, x86]\n")
    line = line_of(text, "  arch: [amd64, x86]")

    assert pipeline.run(_manifest(text), SchemaKind.MANIFEST) == [
        Diagnostic(Range.from_coords(line, 16, line, 19), "'meta.arch.1' should be one of: amd64, arm64")
    ]


def test_list_item_opened_by_a_bare_marker(pipeline):
    text = VALID_TOOL.replace("  - name: city\n", "  -\n    name: city\n").replace("form: llm", "form: manual")
    line = line_of(text, "    form: manual")

    assert pipeline.run(Document("file:///p/tools/search.yaml", text), SchemaKind.TOOL) == [
        Diagnostic(Range.from_coords(line, 4, line, 8), "'parameters.0.form' should be one of: llm, form")
    ]


def test_boolean_key_is_reported_as_unexpected_property(pipeline):
    text = VALID_MANIFEST.replace("    entrypoint: main\n", "    entrypoint: main\n  on: 1\n")
    line = line_of(text, "  on: 1")

    assert pipeline.run(_manifest(text), SchemaKind.MANIFEST) == [
        Diagnostic(Range.from_coords(line, 2, line, 4), "'meta' has unexpected property: 'True'")
    ]


def test_byte_order_mark_does_not_shift_the_first_line(pipeline):
    text = "\ufeff" + VALID_MANIFEST.replace("version: 0.0.1\ntype", "version: 1\ntype", 1)

    assert pipeline.run(_manifest(text), SchemaKind.MANIFEST) == [
        Diagnostic(Range.from_coords(0, 1, 0, 8), "'version' should be string")
    ]


def test_parse_error_ranges_the_failing_line(pipeline):
    diagnostics = pipeline.run(_manifest("a: b\n  c: d\n"), SchemaKind.MANIFEST)

    assert len(diagnostics) == 1
    assert diagnostics[0].range == Range.from_coords(1, 0, 1, 6)
    assert diagnostics[0].message.startswith("YAML parsing error: ")
    assert diagnostics[0].severity == Severity.ERROR


@pytest.mark.parametrize("text", ["", "# only a comment\n"])
def test_empty_document_is_a_parse_error(pipeline, text):
    assert pipeline.run(_manifest(text), SchemaKind.MANIFEST) == [
        Diagnostic(DOCUMENT_START, "YAML parsing error: Empty document")
    ]


def test_multi_document_stream_is_a_parse_error(pipeline):
    diagnostics = pipeline.run(_manifest("a: 1\n---\nb: 2\n"), SchemaKind.MANIFEST)

    assert len(diagnostics) == 1
    assert diagnostics[0].message.startswith("YAML parsing error: ")
    assert "single document" in diagnostics[0].message


def test_parse_failure_skips_validation():
    validator = RecordingValidator()
    pipeline = ValidationPipeline({SchemaKind.MANIFEST: validator})

    diagnostics = pipeline.run(_manifest("key: [unclosed\n"), SchemaKind.MANIFEST)

    assert len(diagnostics) == 1
    assert validator.calls == []


def test_parsed_value_reaches_the_validator():
    validator = RecordingValidator()
    pipeline = ValidationPipeline({SchemaKind.TOOL: validator})

    assert pipeline.run(Document("file:///t.yaml", "a: 1\nb: [x, y]\n"), "tool") == []
    assert validator.calls == [{"a": 1, "b": ["x", "y"]}]


def test_diagnostics_keep_validator_order():
    failures = [
        ValidationFailure(("b",), FailureKind.ENUM, EnumParams(("x",))),
        ValidationFailure(("a",), FailureKind.ENUM, EnumParams(("y",))),
    ]
    pipeline = ValidationPipeline({SchemaKind.MANIFEST: RecordingValidator(failures)})

    diagnostics = pipeline.run(_manifest("a: 1\nb: 2\n"), SchemaKind.MANIFEST)

    assert _messages(diagnostics) == ["'b' should be one of: x", "'a' should be one of: y"]
    assert [d.range.start.line for d in diagnostics] == [1, 0]


def test_run_is_idempotent(pipeline):
    document = _manifest(VALID_MANIFEST.replace("type: plugin", "type: app"))

    assert pipeline.run(document, SchemaKind.MANIFEST) == pipeline.run(document, SchemaKind.MANIFEST)


def test_unexpected_validator_fault_becomes_a_diagnostic():
    pipeline = ValidationPipeline({SchemaKind.MANIFEST: RaisingValidator()})

    assert pipeline.run(_manifest("a: 1\n"), SchemaKind.MANIFEST) == [
        Diagnostic(DOCUMENT_START, "Validation error: boom")
    ]


def test_kind_without_validator_only_reports_parse_errors():
    pipeline = ValidationPipeline({})

    assert pipeline.run(_manifest("type: app\n"), SchemaKind.MANIFEST) == []
    assert len(pipeline.run(_manifest("a: [\n"), SchemaKind.MANIFEST)) == 1


@pytest.mark.parametrize(
    "path, kind",
    [
        ("/work/weather/manifest.yaml", SchemaKind.MANIFEST),
        ("/work/weather/tools/search.yaml", SchemaKind.TOOL),
        ("/work/weather/provider/weather.yaml", SchemaKind.PROVIDER),
        ("/work/weather/tools/search.yml", None),
        ("/work/weather/tools/search.py", None),
        ("/work/weather/other/search.yaml", None),
        ("/work/weather/manifest.yml", None),
    ],
)
def test_schema_kind_for_path(path, kind):
    assert schema_kind_for_path(path) == kind


def test_project_root_for():
    assert project_root_for("/work/weather/manifest.yaml", SchemaKind.MANIFEST) == PurePath("/work/weather")
    assert project_root_for("/work/weather/tools/search.yaml", SchemaKind.TOOL) == PurePath("/work/weather")
    assert project_root_for("/work/weather/provider/w.yaml", SchemaKind.PROVIDER) == PurePath("/work/weather")
