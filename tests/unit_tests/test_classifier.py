import pytest

from mongo_controller.core.exceptions import InvalidOperator
from mongo_controller.query.classifier import (
    build_filter_conditions,
    build_search_condition,
    classify_pairs,
    is_post_key,
    transform_regexp_search,
)


def test_is_post_key_uses_substring_match():
    assert is_post_key("status", ["stat"])
    assert is_post_key("stats.total", ["stats"])
    assert not is_post_key("name", ["stats"])
    assert not is_post_key("name", [])


def test_classify_pairs_splits_pre_and_post():
    text = "name:bob,stats.total:5,age:3"
    assert [p.key for p in classify_pairs(text, ["stats"])] == ["name", "age"]
    assert [p.key for p in classify_pairs(text, ["stats"], post=True)] == ["stats.total"]


def test_build_filter_conditions_normalizes_values():
    conditions = build_filter_conditions('active:true,age:{"$gte":"18"}', [])
    assert conditions == [{"active": True}, {"age": {"$gte": 18}}]


def test_build_filter_conditions_ignores_non_strings():
    assert build_filter_conditions({"name": "bob"}, []) == []
    assert build_filter_conditions(None, []) == []


def test_build_filter_conditions_propagates_invalid_operator():
    with pytest.raises(InvalidOperator):
        build_filter_conditions('code:{"$function":{}}', [])


def test_transform_regexp_search():
    assert transform_regexp_search("bob") == {"$regex": "bob", "$options": "i"}
    assert transform_regexp_search('{"$in":["a"]}') == '{"$in":["a"]}'
    assert transform_regexp_search({"$in": ["a"]}) == {"$in": ["a"]}


def test_build_search_condition_with_regexp():
    condition = build_search_condition("bob", ["name", "email"])
    assert condition == {
        "$or": [
            {"name": {"$regex": "bob", "$options": "i"}},
            {"email": {"$regex": "bob", "$options": "i"}},
        ]
    }


def test_build_search_condition_regexp_stays_text():
    condition = build_search_condition("2024", ["code"])
    assert condition == {"$or": [{"code": {"$regex": "2024", "$options": "i"}}]}


def test_build_search_condition_without_regexp():
    assert build_search_condition("42", ["code"], auto_regexp_search=False) == {"$or": [{"code": 42}]}


def test_build_search_condition_structured_term():
    condition = build_search_condition('{"$in":["a","b"]}', ["tag"])
    assert condition == {"$or": [{"tag": {"$in": ["a", "b"]}}]}


@pytest.mark.parametrize("search, fields", [(None, ["name"]), ("", ["name"]), ("bob", []), (5, ["name"])])
def test_build_search_condition_none(search, fields):
    assert build_search_condition(search, fields) is None
