"""Tests for mapping failure paths back to text ranges."""

from plugin_schema.models import (
    DOCUMENT_START,
    AdditionalPropertyParams,
    EnumParams,
    FailureKind,
    Range,
    RequiredParams,
    TypeParams,
    ValidationFailure,
)
from plugin_schema.parsing import SourceIndex
from plugin_schema.validation import resolve

from .conftest import VALID_MANIFEST, line_of


def _enum(*path):
    return ValidationFailure(tuple(path), FailureKind.ENUM, EnumParams(("x",)))


def test_top_level_key_ranges_the_key_token():
    index = SourceIndex.build(VALID_MANIFEST)

    assert resolve(_enum("type"), index) == Range.from_coords(1, 0, 1, 4)


def test_nested_key_ranges_the_innermost_key():
    index = SourceIndex.build(VALID_MANIFEST)
    line = line_of(VALID_MANIFEST, "    language: python")

    assert resolve(_enum("meta", "runner", "language"), index) == Range.from_coords(line, 4, line, 12)


def test_same_key_under_different_parents_resolves_by_scope():
    index = SourceIndex.build(VALID_MANIFEST)
    meta_version = line_of(VALID_MANIFEST, "  version: 0.0.1")
    runner_version = line_of(VALID_MANIFEST, '    version: "3.12"')

    assert resolve(_enum("version"), index) == Range.from_coords(0, 0, 0, 7)
    assert resolve(_enum("meta", "version"), index) == Range.from_coords(meta_version, 2, meta_version, 9)
    assert resolve(_enum("meta", "runner", "version"), index) == Range.from_coords(
        runner_version, 4, runner_version, 11
    )


def test_array_index_ranges_the_list_marker():
    index = SourceIndex.build(VALID_MANIFEST)
    line = line_of(VALID_MANIFEST, "    - arm64")

    assert resolve(_enum("meta", "arch", 1), index) == Range.from_coords(line, 4, line, 5)


def test_key_inside_list_item():
    text = "parameters:\n  - name: city\n    form: llm\n  - name: days\n    form: manual\n"
    index = SourceIndex.build(text)

    assert resolve(_enum("parameters", 1, "form"), index) == Range.from_coords(4, 4, 4, 8)


def test_root_list_items_are_at_column_zero():
    index = SourceIndex.build("- a\n- b\n")

    assert resolve(_enum(1), index) == Range.from_coords(1, 0, 1, 1)


def test_required_ranges_the_parent_key():
    index = SourceIndex.build(VALID_MANIFEST)
    failure = ValidationFailure(("meta", "runner"), FailureKind.REQUIRED, RequiredParams("entrypoint"))
    line = line_of(VALID_MANIFEST, "  runner:")

    assert resolve(failure, index) == Range.from_coords(line, 2, line, 8)


def test_missing_top_level_property_ranges_document_start():
    index = SourceIndex.build("type: plugin\nauthor: a\nname: n\n")
    failure = ValidationFailure((), FailureKind.REQUIRED, RequiredParams("version"))

    assert resolve(failure, index) == DOCUMENT_START


def test_additional_property_ranges_the_unexpected_key():
    text = "meta:\n  version: 1\n  extra_field: 2\n"
    index = SourceIndex.build(text)
    failure = ValidationFailure(("meta",), FailureKind.ADDITIONAL_PROPERTIES, AdditionalPropertyParams("extra_field"))

    assert resolve(failure, index) == Range.from_coords(2, 2, 2, 13)


def test_unlocatable_path_falls_back_to_document_start():
    index = SourceIndex.build(VALID_MANIFEST)

    assert resolve(_enum("nonexistent"), index) == DOCUMENT_START
    assert resolve(_enum("meta", "nope", "language"), index) == DOCUMENT_START
    assert resolve(_enum("meta", "arch", 7), index) == DOCUMENT_START


def test_flow_collection_items_range_the_item():
    index = SourceIndex.build("meta: {arch: [amd64, x86]}\n")

    assert resolve(_enum("meta", "arch"), index) == Range.from_coords(0, 7, 0, 11)
    assert resolve(_enum("meta", "arch", 1), index) == Range.from_coords(0, 21, 0, 24)


def test_keys_under_a_bare_list_marker():
    index = SourceIndex.build("parameters:\n  -\n    name: city\n    form: manual\n")

    assert resolve(_enum("parameters", 0), index) == Range.from_coords(1, 2, 1, 3)
    assert resolve(_enum("parameters", 0, "form"), index) == Range.from_coords(3, 4, 3, 8)


def test_key_after_byte_order_mark():
    index = SourceIndex.build("\ufeffversion: 1\ntype: plugin\n")

    assert resolve(_enum("version"), index) == Range.from_coords(0, 1, 0, 8)
    assert resolve(_enum("type"), index) == Range.from_coords(1, 0, 1, 4)


def test_boolean_key_is_not_a_list_index():
    index = SourceIndex.build("meta:\n  version: 1\n  on: 1\n")
    failure = ValidationFailure(("meta",), FailureKind.ADDITIONAL_PROPERTIES, AdditionalPropertyParams(True))

    assert resolve(failure, index) == Range.from_coords(2, 2, 2, 4)


def test_quoted_key_excludes_quotes():
    index = SourceIndex.build('meta:\n  "runner": {}\n')

    assert resolve(_enum("meta", "runner"), index) == Range.from_coords(1, 3, 1, 9)


def test_duplicate_key_ranges_the_first_occurrence():
    index = SourceIndex.build("type: a\ntype: b\n")

    assert resolve(_enum("type"), index) == Range.from_coords(0, 0, 0, 4)


def test_merged_keys_range_their_definition():
    index = SourceIndex.build("base: &b\n  arch: x\nmeta:\n  <<: *b\n  version: 1\n")

    assert resolve(_enum("meta", "version"), index) == Range.from_coords(4, 2, 4, 9)
    assert resolve(_enum("meta", "arch"), index) == Range.from_coords(1, 2, 1, 6)


def test_text_scan_is_used_when_the_text_does_not_compose():
    index = SourceIndex.build("a: 1\n---\nb: 2\n")

    assert index.locate_path(("b",)) is None
    assert resolve(_enum("b"), index) == Range.from_coords(2, 0, 2, 1)


def test_empty_path_ranges_document_start():
    index = SourceIndex.build("- 1\n")
    failure = ValidationFailure((), FailureKind.TYPE, TypeParams(("object",)))

    assert resolve(failure, index) == DOCUMENT_START
