from __future__ import annotations

import io
import logging

import pytest

from bepcfg import FLAGS_MESSAGE, parse, parse_lines
from bepcfg.errors import CfgParseError
from bepcfg.parser import EntryBuilder, infer_setting_type
from bepcfg.values import (
    BoolValue,
    EnumValue,
    FlagsValue,
    FloatValue,
    IntValue,
    NumRange,
    StringValue,
)

LEVELS = ("None", "Fatal", "Error", "Warning", "Message", "Info", "Debug", "All")


def test_parse_sample_document(sample_cfg):
    doc = parse(sample_cfg)

    assert doc.metadata is not None
    assert doc.metadata.mod_name == "Hq Launcher Tweaks"
    assert doc.metadata.mod_version == "1.2.3"
    assert doc.metadata.mod_guid == "com.example.hqtweaks"
    assert [s.name for s in doc.sections] == ["General", "Logging"]
    assert [e.name for e in doc.sections[0].entries] == ["Enabled", "Volume", "Count"]
    assert [e.name for e in doc.sections[1].entries] == ["Levels", "Mode", "Greeting"]


def test_parse_sample_values(sample_cfg):
    doc = parse(sample_cfg)

    enabled = doc.get_entry("General", "Enabled")
    assert enabled.description == "Enables the thing.\nSecond line."
    assert enabled.default == BoolValue(True)
    assert enabled.value == BoolValue(False)

    volume = doc.get_entry("General", "Volume")
    assert volume.value == FloatValue(0.75, NumRange(0.0, 1.0))
    assert volume.default == FloatValue(0.5, NumRange(0.0, 1.0))

    count = doc.get_entry("General", "Count")
    assert count.description is None
    assert count.value == IntValue(42, NumRange(1, 100))
    assert count.default == IntValue(10, NumRange(1, 100))

    levels = doc.get_entry("Logging", "Levels")
    assert levels.value == FlagsValue(frozenset({2, 3}), LEVELS)
    assert levels.default == FlagsValue(frozenset({5}), LEVELS)

    mode = doc.get_entry("Logging", "Mode")
    assert mode.value == EnumValue(2, ("Easy", "Normal", "Hard"))
    assert mode.default == EnumValue(1, ("Easy", "Normal", "Hard"))
    assert mode.value.options == mode.default.options

    greeting = doc.get_entry("Logging", "Greeting")
    assert greeting.value == StringValue("Hello\nWorld")
    assert greeting.default == StringValue("hi")


def test_boolean_scenario():
    doc = parse("[Section1]\n# Setting type: Boolean\n# Default value: True\nKey1 = False\n")
    assert len(doc.sections) == 1
    section = doc.sections[0]
    assert section.name == "Section1"
    assert len(section.entries) == 1
    entry = section.entries[0]
    assert entry.name == "Key1"
    assert entry.default == BoolValue(True)
    assert entry.value == BoolValue(False)


@pytest.mark.parametrize(
    "line, expected",
    [
        ("X = true", BoolValue(True)),
        ("X = false", BoolValue(False)),
        ("X = 12", IntValue(12)),
        ("X = 1.5", FloatValue(1.5)),
        ("X = hello", StringValue("hello")),
        ("X = -5", StringValue("-5")),
    ],
)
def test_heuristic_typing(line, expected):
    doc = parse(f"[S]\n{line}\n")
    assert doc.get_value("S", "X") == expected


def test_infer_setting_type():
    assert infer_setting_type("3.0") == "Single"
    assert infer_setting_type("3") == "Int32"
    assert infer_setting_type("true") == "Boolean"
    assert infer_setting_type("fast") == "Boolean"
    assert infer_setting_type("True") == "String"
    assert infer_setting_type("") == "String"


def test_comma_decimal_separator():
    doc = parse("[S]\n# Setting type: Single\nPi = 3,14\n")
    assert doc.get_value("S", "Pi") == FloatValue(3.14)


def test_float_range_accepts_commas():
    doc = parse(
        "[S]\n# Setting type: Single\n"
        "# Acceptable value range: From 0,5 to 2,5\nX = 1\n"
    )
    assert doc.get_value("S", "X") == FloatValue(1.0, NumRange(0.5, 2.5))


def test_double_and_number_type_names():
    doc = parse("[S]\n# Setting type: Double\nA = 2\n# Setting type: Number\nB = 7\n")
    assert doc.get_value("S", "A") == FloatValue(2.0)
    assert doc.get_value("S", "B") == IntValue(7)


def test_unknown_setting_type_is_string():
    doc = parse("[S]\n# Setting type: KeyboardShortcut\nKey = 12\n")
    assert doc.get_value("S", "Key") == StringValue("12")


def test_enum_value():
    doc = parse("[S]\n# Setting type: Mode\n# Acceptable values: A, B, C\nKey2 = B\n")
    assert doc.get_value("S", "Key2") == EnumValue(1, ("A", "B", "C"))


def test_unmatched_enum_falls_back_to_first_option(caplog):
    text = "[S]\n# Acceptable values: A, B, C\nKey = Z\n"
    with caplog.at_level(logging.WARNING, logger="bepcfg.parser"):
        doc = parse(text)
    assert doc.get_value("S", "Key") == EnumValue(0, ("A", "B", "C"))
    assert "not an acceptable value" in caplog.text


def test_flags_drop_unknown_tokens():
    text = f"[S]\n# Acceptable values: A, B, C\n{FLAGS_MESSAGE}\nKey = C, Nope, A\n"
    doc = parse(text)
    assert doc.get_value("S", "Key") == FlagsValue(frozenset({0, 2}), ("A", "B", "C"))


def test_flags_zero_is_empty():
    text = f"[S]\n# Acceptable values: A, B\n{FLAGS_MESSAGE}\nKey = 0\n"
    assert parse(text).get_value("S", "Key") == FlagsValue(frozenset(), ("A", "B"))


def test_missing_default_comment_means_no_default():
    doc = parse("[S]\n# Setting type: Int32\nX = 1\n")
    assert doc.get_entry("S", "X").default is None


def test_explicit_empty_default():
    doc = parse("[S]\n# Setting type: Int32\n# Default value:\nX = 1\n")
    assert doc.get_entry("S", "X").default is None


def test_empty_string_default():
    doc = parse("[S]\n# Setting type: String\n# Default value: \nX = abc\n")
    assert doc.get_entry("S", "X").default == StringValue("")


def test_builder_state_resets_after_each_entry():
    text = (
        "[S]\n## first\n# Setting type: String\n# Default value: x\nA = 1\n"
        "B = 2\n"
    )
    doc = parse(text)
    a = doc.get_entry("S", "A")
    b = doc.get_entry("S", "B")
    assert a.value == StringValue("1")
    assert a.default == StringValue("x")
    assert a.description == "first"
    assert b.value == IntValue(2)
    assert b.default is None
    assert b.description is None


def test_description_keeps_inner_indentation():
    doc = parse("[S]\n##  indented\n##\nX = a\n")
    assert doc.get_entry("S", "X").description == " indented\n"


def test_unknown_comments_and_bare_lines_are_ignored():
    text = "[S]\n# Some future field: 3\njust some words\nX = 1\n"
    doc = parse(text)
    assert [e.name for e in doc.sections[0].entries] == ["X"]
    assert doc.get_value("S", "X") == IntValue(1)


def test_value_split_on_first_equals():
    doc = parse("[S]\nUrl = http://x/?a=b\n")
    assert doc.get_value("S", "Url") == StringValue("http://x/?a=b")


def test_crlf_line_endings():
    doc = parse("[S]\r\n# Setting type: Int32\r\nX = 5\r\n")
    assert doc.get_value("S", "X") == IntValue(5)


def test_parse_lines_from_file_object(sample_cfg):
    doc = parse_lines(io.StringIO(sample_cfg))
    assert doc == parse(sample_cfg)


def test_empty_document():
    doc = parse("")
    assert doc.metadata is None
    assert doc.sections == []


def test_empty_section_is_kept():
    doc = parse("[A]\n[B]\nX = 1\n")
    assert [s.name for s in doc.sections] == ["A", "B"]
    assert doc.sections[0].entries == []


def test_metadata_without_guid_line():
    doc = parse("## Settings file was created by plugin Foo 1.0\n\n[S]\nX = 1\n")
    assert doc.metadata.mod_name == "Foo"
    assert doc.metadata.mod_version == "1.0"
    assert doc.metadata.mod_guid == ""
    assert doc.get_value("S", "X") == IntValue(1)


def test_metadata_header_at_end_of_input():
    doc = parse("## Settings file was created by plugin Foo Bar 2.0")
    assert doc.metadata.mod_name == "Foo Bar"
    assert doc.metadata.mod_guid == ""


def test_entry_before_section_is_fatal():
    with pytest.raises(CfgParseError) as excinfo:
        parse("X = 1\n[S]\n")
    assert "entry has no section" in str(excinfo.value)
    assert excinfo.value.line_no == 1


def test_entry_before_section_with_bad_value():
    with pytest.raises(CfgParseError) as excinfo:
        parse("# Setting type: Int32\nX = abc\n[S]\n")
    assert "entry has no section" in str(excinfo.value)
    assert excinfo.value.line_no == 2


def test_blank_lines_keep_pending_comments():
    text = "[S]\n# Setting type: Int32\n\n# Default value: 3\n\nX = 5\n"
    entry = parse(text).get_entry("S", "X")
    assert entry.value == IntValue(5)
    assert entry.default == IntValue(3)


def test_section_header_keeps_pending_comments():
    text = "[A]\n## moved\n# Setting type: String\n[B]\nX = 5\n"
    doc = parse(text)
    assert doc.section("A").entries == []
    entry = doc.get_entry("B", "X")
    assert entry.value == StringValue("5")
    assert entry.description == "moved"


@pytest.mark.parametrize(
    "text",
    [
        "[S]\n# Setting type: Boolean\nX = yes\n",
        "[S]\n# Setting type: Int32\nX = 1.5\n",
        "[S]\n# Setting type: Int32\nX = 2147483648\n",
        "[S]\n# Setting type: Single\nX = abc\n",
        "[S]\n# Setting type: Int32\n# Default value: nope\nX = 1\n",
        "[S]\n# Setting type: Int32\n# Acceptable value range: From a to b\nX = 1\n",
    ],
)
def test_type_coercion_failures(text):
    with pytest.raises(CfgParseError):
        parse(text)


def test_parse_error_reports_line_number():
    with pytest.raises(CfgParseError) as excinfo:
        parse("[S]\n\n# Setting type: Boolean\nFlag = maybe\n")
    assert excinfo.value.line_no == 4
    assert str(excinfo.value).startswith("line 4:")


def test_entry_builder_directly():
    builder = EntryBuilder()
    builder.apply_comment("Setting type: Int32")
    builder.apply_comment("Default value: 3")
    builder.apply_comment("Acceptable value range: From 0 to 10")
    entry = builder.build("Size", "7")
    assert entry.value == IntValue(7, NumRange(0, 10))
    assert entry.default == IntValue(3, NumRange(0, 10))
