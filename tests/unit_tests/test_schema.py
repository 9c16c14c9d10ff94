from datetime import UTC, datetime
from uuid import UUID

from mongo_controller.controller.schema import append_basic_schema, append_update_schema

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


def test_append_basic_schema_stamps_document():
    doc = {"name": "bob"}
    stamped = append_basic_schema(doc, now=NOW)

    assert stamped["name"] == "bob"
    assert UUID(stamped["id"]).version == 4
    assert stamped["createdAt"] == NOW
    assert stamped["updatedAt"] == NOW
    assert doc == {"name": "bob"}


def test_append_basic_schema_keeps_existing_id():
    assert append_basic_schema({"id": "fixed"}, now=NOW)["id"] == "fixed"


def test_append_basic_schema_list_shares_timestamp():
    stamped = append_basic_schema([{"name": "a"}, {"name": "b"}])
    assert len(stamped) == 2
    assert stamped[0]["createdAt"] == stamped[1]["createdAt"]
    assert stamped[0]["id"] != stamped[1]["id"]
    assert stamped[0]["createdAt"].tzinfo is not None


def test_append_update_schema_plain_document():
    assert append_update_schema({"name": "bob"}, now=NOW) == {"name": "bob", "updatedAt": NOW}


def test_append_update_schema_update_query():
    assert append_update_schema({"$inc": {"count": 1}}, now=NOW) == {"$inc": {"count": 1}, "$set": {"updatedAt": NOW}}
    assert append_update_schema({"$set": {"name": "bob"}}, now=NOW) == {"$set": {"name": "bob", "updatedAt": NOW}}
