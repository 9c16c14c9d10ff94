from datetime import UTC, datetime, timedelta, timezone

import pytest

from mongo_controller.core.exceptions import InvalidOperator, MalformedStructuredValue
from mongo_controller.query.datetime_parser import is_iso8601, parse_iso8601
from mongo_controller.query.normalizer import normalize, parse_number, textual_form


@pytest.mark.parametrize(
    "value, expected",
    [
        ("true", True),
        ("FALSE", False),
        ("True", True),
        ("42", 42),
        ("-7", -7),
        ("3.5", 3.5),
        ("1e3", 1000.0),
        (".5", 0.5),
        (" 12 ", 12),
        ("", ""),
        ("bob", "bob"),
        ("0x1A", "0x1A"),
        ("1_000", "1_000"),
        ("inf", "inf"),
        ("NaN", "NaN"),
    ],
)
def test_normalize_scalars(value, expected):
    result = normalize(value)
    assert result == expected
    assert type(result) is type(expected)


def test_normalize_keeps_typed_values():
    assert normalize(True) is True
    assert normalize(5) == 5
    assert normalize(None) is None


def test_normalize_iso_dates():
    assert normalize("2024-01-15") == datetime(2024, 1, 15, tzinfo=UTC)
    assert normalize("2024-01-15T10:30:00Z") == datetime(2024, 1, 15, 10, 30, tzinfo=UTC)
    assert normalize("2024-01-15 10:30") == datetime(2024, 1, 15, 10, 30, tzinfo=UTC)

    offset = normalize("2024-01-15T10:30:00+02:00")
    assert offset.utcoffset() == timedelta(hours=2)
    assert offset == datetime(2024, 1, 15, 8, 30, tzinfo=UTC)


def test_normalize_impossible_date_stays_text():
    assert normalize("2023-02-30") == "2023-02-30"


def test_normalize_structured_string():
    assert normalize('{"$gte":"5","$lt":10}') == {"$gte": 5, "$lt": 10}
    assert normalize('{"tags":["a","2"]}') == {"tags": ["a", 2]}


def test_normalize_mapping_keeps_literal_keys():
    value = {"dateString": "2024-01-15", "$regex": "12", "$options": "i", "from": "2024-01-15"}
    assert normalize(value) == {
        "dateString": "2024-01-15",
        "$regex": "12",
        "$options": "i",
        "from": datetime(2024, 1, 15, tzinfo=UTC),
    }


def test_normalize_list():
    assert normalize(["1", "true", "x"]) == [1, True, "x"]


@pytest.mark.parametrize(
    "value",
    [
        '{"$function":{"body":"return 1"}}',
        "$accumulator",
        {"nested": {"$function": "x"}},
        ["$function"],
    ],
)
def test_normalize_rejects_forbidden_operators(value):
    with pytest.raises(InvalidOperator):
        normalize(value)


def test_normalize_malformed_structured_value():
    with pytest.raises(MalformedStructuredValue) as exc_info:
        normalize("{not json}")
    assert exc_info.value.value == "{not json}"


def test_textual_form():
    assert textual_form({"a": 1}) == '{"a": 1}'
    assert textual_form(False) == "false"
    assert textual_form(None) == "null"
    assert textual_form(1.5) == "1.5"


def test_parse_number():
    assert parse_number("10") == 10
    assert parse_number("1.") == 1.0
    assert parse_number("1e999") is None
    assert parse_number("abc") is None
    assert parse_number("") is None


def test_iso8601_grammar():
    assert is_iso8601("2024-01")
    assert is_iso8601("2024-01-15T10:30:00.123+0100")
    assert not is_iso8601("15/01/2024")
    assert not is_iso8601("2024-01-15T")
    assert not is_iso8601("20240115")


def test_parse_iso8601_preserves_offset():
    parsed = parse_iso8601("2024-06-01T00:00:00-05:00")
    assert parsed is not None
    assert parsed.tzinfo is not None
    assert parsed.utcoffset() == timezone(timedelta(hours=-5)).utcoffset(None)


def test_parse_iso8601_rejects_other_text():
    assert parse_iso8601("yesterday") is None


def test_normalize_returns_datetimes_unchanged():
    naive = datetime(2024, 1, 1)
    aware = datetime(2024, 1, 1, 8, 30, tzinfo=timezone(timedelta(hours=2)))

    assert normalize(naive) == naive
    assert normalize(naive).tzinfo is None
    assert normalize(aware) is aware
    assert normalize({"from": naive}) == {"from": naive}


@pytest.mark.parametrize(
    "value",
    [
        "true",
        False,
        "42",
        7,
        "1e20",
        "-2.5E-3",
        1e20,
        "1e999",
        "2024-01-15T10:30:00+02:00",
        "2024-01-15T10:30:00.123456Z",
        "2024-01-15",
        datetime(2024, 1, 1),
        datetime(2024, 1, 1, tzinfo=UTC),
        '{"$regex":"2024","$options":"i"}',
        '{"dateString":"2024-01-01","from":"2024-01-01","count":"3"}',
        ["1", "x", "2024-01-01", ["true"]],
        {"nested": {"at": "2024-01-01T00:00:00Z", "n": "5"}},
        "",
        "hello",
        "0x1A",
    ],
)
def test_normalize_is_idempotent(value):
    once = normalize(value)
    assert normalize(once) == once
