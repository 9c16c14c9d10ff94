"""
This module provides the generic `Controller` for MongoDB collections.

It defines:
- `IndexDefinition` and `ControllerOptions`: Pydantic models configuring a
  controller (indexes, search fields, post-match keywords, ...).
- `Controller`: CRUD operations over a `pymongo` collection, each wrapped in
  `pre-*` / `post-*` hooks, plus `search` / `count`, which compile the text
  query language (search term, filter string, sort string, page) into an
  aggregation pipeline.

Subclasses customise the pipeline by overriding `build_aggregate_builder`,
whose stages are spliced in between the pre-query and the sort stage.
"""

import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pymongo import ASCENDING
from pymongo.collection import Collection

from mongo_controller.core.config import get_app_settings
from mongo_controller.core.exceptions import CollectionRequired
from mongo_controller.core.root_logger import get_logger
from mongo_controller.core.settings import AppSettings
from mongo_controller.query import pipeline
from mongo_controller.query.builder import AggregateBuilder
from mongo_controller.query.update import is_update_query

from .events import EventEmitter
from .schema import append_basic_schema, append_update_schema

Document = dict[str, Any]
SearchInput = str | dict[str, Any] | None


class IndexDefinition(BaseModel):
    """An index to create on the controller's collection."""

    keys: dict[str, Any]
    """Index keys and directions, e.g. `{"id": 1}` or `{"name": "text"}`."""
    options: dict[str, Any] = Field(default_factory=dict)
    """Keyword options for `Collection.create_index`, e.g. `{"unique": True}`."""

    def key_list(self) -> list[tuple[str, Any]]:
        return list(self.keys.items())


class ControllerOptions(BaseModel):
    """
    Options accepted by `Controller`.

    `auto_regexp_search` and `skip_index` fall back to the application
    settings (`AUTO_REGEXP_SEARCH`, `SKIP_INDEX`) when left unset.
    """

    auto_regexp_search: bool | None = None
    """Search plain strings as case-insensitive regular expressions."""
    search_fields: list[str] = Field(default_factory=list)
    """Fields matched by the free-text search term."""
    post_match_keywords: list[str] = Field(default_factory=list)
    """Substrings of filter keys whose conditions run after the transformation stages."""
    skip_index: bool | None = None
    """Do not create indexes when the controller is constructed."""
    indexes: list[IndexDefinition] = Field(default_factory=list)
    """Additional indexes; a unique index on `id` is always created."""
    logger: logging.Logger | None = None
    """Logger to use instead of the package logger's child for this collection."""

    model_config = ConfigDict(arbitrary_types_allowed=True)


class Controller(EventEmitter):
    """
    A generic controller exposing CRUD and query-language search over one collection.

    Documents are addressed by their string `id`; `insert_*` stamps `id`,
    `createdAt` and `updatedAt`, and `update_*` refreshes `updatedAt`.
    """

    auto_regexp_search: bool
    search_fields: list[str]
    # keys containing one of these are matched after the transformation stages
    post_match_keywords: list[str]

    def __init__(self, collection: Collection | None = None, options: ControllerOptions | None = None, **overrides: Any) -> None:
        """
        Initializes the controller.

        Args:
            collection (Collection): The `pymongo` collection to manage.
            options (ControllerOptions | None, optional): Controller options.
            **overrides: Individual `ControllerOptions` fields, applied on top of
                         `options`.

        Raises:
            CollectionRequired: If no collection is given.
        """
        if collection is None:
            raise CollectionRequired(collection)

        opts = options or ControllerOptions()
        if overrides:
            opts = ControllerOptions.model_validate({**dict(opts), **overrides})
        settings = self.settings

        self._collection = collection
        self.logger = opts.logger or get_logger(collection.name)
        super().__init__(self.logger)

        self._indexes = [IndexDefinition(keys={"id": ASCENDING}, options={"unique": True}), *opts.indexes]
        self.auto_regexp_search = settings.AUTO_REGEXP_SEARCH if opts.auto_regexp_search is None else opts.auto_regexp_search
        self.search_fields = list(opts.search_fields)
        self.post_match_keywords = list(opts.post_match_keywords)

        skip_index = settings.SKIP_INDEX if opts.skip_index is None else opts.skip_index
        if not skip_index:
            self.create_indexes()
        self.emit("initialized")
        self.logger.debug(f"constructor created collection={self.collection_name}")

    @property
    def settings(self) -> AppSettings:
        return get_app_settings()

    @property
    def collection(self) -> Collection:
        return self._collection

    @collection.setter
    def collection(self, collection: Collection | None) -> None:
        if collection is None:
            raise CollectionRequired(collection)
        self._collection = collection

    @property
    def collection_name(self) -> str:
        return self._collection.name

    @property
    def indexes(self) -> list[IndexDefinition]:
        return list(self._indexes)

    # ===============================================
    # Indexes

    def create_indexes(self) -> None:
        """Creates every configured index. Existing indexes are left untouched."""
        self.logger.debug("create_indexes started")
        for index in self._indexes:
            self.collection.create_index(index.key_list(), **index.options)
            self.logger.debug(f"index {index.keys} is created")
        self.logger.debug("create_indexes ended")

    # ===============================================
    # Query Language

    def count(self, search: SearchInput = None, filter: SearchInput = None) -> int:
        """Counts the documents matching `search` and `filter`."""
        self.logger.debug(f"count started search={search!r} filter={filter!r}")
        self.emit("pre-count", search, filter)
        result = len(self.search(search, filter))
        self.emit("post-count", result, search, filter)
        self.logger.debug("count ended")
        return result

    def search(
        self,
        search: SearchInput = None,
        filter: SearchInput = None,
        sort: str | None = None,
        page: int | None = None,
        page_size: int | None = None,
    ) -> list[Document]:
        """
        Runs the pipeline compiled from the query-language inputs.

        Args:
            search (SearchInput, optional): Free-text term matched against
                `search_fields`, or a raw condition mapping.
            filter (SearchInput, optional): Filter string `key:value,key:value`.
            sort (str | None, optional): Sort string `+field,-field`.
            page (int | None, optional): 1-based page number.
            page_size (int | None, optional): Documents per page.

        Returns:
            list[Document]: The matching documents.

        Raises:
            InvalidOperator: If a value contains `$function` or `$accumulator`.
            MalformedStructuredValue: If a `{...}` value is not valid JSON.
        """
        self.logger.debug(f"search started search={search!r} filter={filter!r} sort={sort!r} page={page} page_size={page_size}")
        self.emit("pre-search", search, filter, sort, page, page_size)
        stages = self.compute_pipeline(search, filter, sort, page, page_size).to_list()
        result = list(self.collection.aggregate(stages))
        self.emit("post-search", result, search, filter, sort, page, page_size)
        self.logger.debug("search ended")
        return result

    # ===============================================
    # Create

    def insert_one(self, docs: Document, **options: Any) -> Document | None:
        """Stamps and inserts one document, then returns it as stored."""
        self.logger.debug(f"insert_one started docs={docs!r}")
        # single end-point for insert validation
        self.emit("pre-insert", docs)
        doc = append_basic_schema(docs)
        self.emit("pre-insert-one", doc, options)
        self.collection.insert_one(dict(doc), **options)
        result = self.collection.find_one({"id": doc["id"]})
        self.emit("post-insert-one", result, doc, options)
        self.emit("post-insert")
        self.logger.debug("insert_one ended")
        return result

    def insert_many(self, docs: list[Document], **options: Any) -> list[Document]:
        """Stamps and inserts several documents, then returns them ordered by `createdAt`."""
        self.logger.debug(f"insert_many started count={len(docs)}")
        self.emit("pre-insert", docs)
        stamped = append_basic_schema(docs)
        self.emit("pre-insert-many", stamped, options)
        if stamped:
            self.collection.insert_many([dict(doc) for doc in stamped], **options)
        ids = [doc["id"] for doc in stamped]
        result = list(self.collection.find({"id": {"$in": ids}}, sort=[("createdAt", ASCENDING)]))
        self.emit("post-insert-many", result, stamped, options)
        self.emit("post-insert")
        self.logger.debug("insert_many ended")
        return result

    # ===============================================
    # Read

    def find(self, filter: Document | None = None, **options: Any) -> list[Document]:
        self.logger.debug(f"find started filter={filter!r}")
        filter = filter or {}
        self.emit("pre-find", filter, options)
        result = list(self.collection.find(filter, **options))
        self.emit("post-find", result, filter, options)
        self.logger.debug("find ended")
        return result

    def find_one(self, filter: Document | None = None, **options: Any) -> Document | None:
        self.logger.debug(f"find_one started filter={filter!r}")
        filter = filter or {}
        self.emit("pre-find-one", filter, options)
        result = self.collection.find_one(filter, **options)
        self.emit("post-find-one", result, filter, options)
        self.logger.debug("find_one ended")
        return result

    def find_by_id(self, id: str, **options: Any) -> Document | None:
        self.logger.debug(f"find_by_id started id={id!r}")
        self.emit("pre-find-by-id", id, options)
        result = self.collection.find_one({"id": id}, **options)
        self.emit("post-find-by-id", result, id, options)
        self.logger.debug("find_by_id ended")
        return result

    # ===============================================
    # Update

    def _update_document(self, docs: Document) -> Document:
        # plain partial documents are applied with $set
        return docs if is_update_query(docs) else {"$set": docs}

    def update_one(self, filter: Document, docs: Document, **options: Any) -> Document | None:
        """
        Updates the first document matching `filter`.

        Returns:
            Document | None: The updated document, or None if nothing matched.
        """
        self.logger.debug(f"update_one started filter={filter!r}")
        # single end-point for update validation
        self.emit("pre-update", filter, docs)
        doc = append_update_schema(docs)
        self.emit("pre-update-one", filter, doc, options)
        found = self.collection.find_one(filter)
        self.collection.update_one(filter, self._update_document(doc), **options)
        result = self.collection.find_one({"id": found["id"]}) if found else None
        self.emit("post-update-one", result, filter, doc, options)
        self.emit("post-update")
        self.logger.debug("update_one ended")
        return result

    def update_many(self, filter: Document, docs: Document, **options: Any) -> list[Document]:
        """Updates every document matching `filter` and returns them as updated."""
        self.logger.debug(f"update_many started filter={filter!r}")
        self.emit("pre-update", filter, docs)
        doc = append_update_schema(docs)
        self.emit("pre-update-many", filter, doc, options)
        ids = [found["id"] for found in self.collection.find(filter)]
        self.collection.update_many(filter, self._update_document(doc), **options)
        result = list(self.collection.find({"id": {"$in": ids}}))
        self.emit("post-update-many", result, filter, doc, options)
        self.emit("post-update")
        self.logger.debug("update_many ended")
        return result

    def update_by_id(self, id: str, docs: Document, **options: Any) -> Document | None:
        self.logger.debug(f"update_by_id started id={id!r}")
        self.emit("pre-update", {"id": id}, docs)
        doc = append_update_schema(docs)
        self.emit("pre-update-by-id", id, doc, options)
        self.collection.update_one({"id": id}, self._update_document(doc), **options)
        result = self.collection.find_one({"id": id})
        self.emit("post-update-by-id", result, id, doc, options)
        self.emit("post-update")
        self.logger.debug("update_by_id ended")
        return result

    # ===============================================
    # Delete

    def delete_one(self, filter: Document, **options: Any) -> Document | None:
        """Deletes the first document matching `filter` and returns it."""
        self.logger.debug(f"delete_one started filter={filter!r}")
        # single end-point for delete validation
        self.emit("pre-delete", filter)
        result = self.collection.find_one(filter)
        self.emit("pre-delete-one", filter, options)
        self.collection.delete_one(filter, **options)
        self.emit("post-delete-one", result, filter, options)
        self.emit("post-delete")
        self.logger.debug("delete_one ended")
        return result

    def delete_many(self, filter: Document | None = None, **options: Any) -> list[Document]:
        """Deletes every document matching `filter` (all when omitted) and returns them."""
        self.logger.debug(f"delete_many started filter={filter!r}")
        self.emit("pre-delete", filter)
        filter = filter or {}
        result = list(self.collection.find(filter))
        self.emit("pre-delete-many", filter, options)
        self.collection.delete_many(filter, **options)
        self.emit("post-delete-many", result, filter, options)
        self.emit("post-delete")
        self.logger.debug("delete_many ended")
        return result

    def delete_by_id(self, id: str, **options: Any) -> Document | None:
        self.logger.debug(f"delete_by_id started id={id!r}")
        self.emit("pre-delete", {"id": id})
        result = self.collection.find_one({"id": id})
        self.emit("pre-delete-by-id", id, options)
        self.collection.delete_one({"id": id}, **options)
        self.emit("post-delete-by-id", result, id, options)
        self.emit("post-delete")
        self.logger.debug("delete_by_id ended")
        return result

    # ===============================================
    # Pipeline

    def compute_pre_query(self, search: SearchInput = None, filter: SearchInput = None, *_args: Any) -> AggregateBuilder:
        """Search is always part of the pre query: filter first, then aggregate a smaller set."""
        self.logger.debug(f"compute_pre_query started search={search!r} filter={filter!r}")
        builder = pipeline.compute_pre_query(search, filter, self.search_fields, self.post_match_keywords, self.auto_regexp_search)
        self.logger.debug("compute_pre_query ended")
        return builder

    def compute_post_query(self, filter: SearchInput = None, *_args: Any) -> AggregateBuilder | None:
        self.logger.debug(f"compute_post_query started filter={filter!r}")
        builder = pipeline.compute_post_query(filter, self.post_match_keywords)
        self.logger.debug("compute_post_query ended")
        return builder

    def compute_sort(self, sort: str | None = None) -> AggregateBuilder | None:
        self.logger.debug(f"compute_sort started sort={sort!r}")
        builder = pipeline.compute_sort(sort)
        self.logger.debug("compute_sort ended")
        return builder

    def compute_option(self, page: int | None = None, page_size: int | None = None) -> AggregateBuilder | None:
        self.logger.debug(f"compute_option started page={page} page_size={page_size}")
        builder = pipeline.compute_option(page, page_size)
        self.logger.debug("compute_option ended")
        return builder

    def compute_pipeline(
        self,
        search: SearchInput = None,
        filter: SearchInput = None,
        sort: str | None = None,
        page: int | None = None,
        page_size: int | None = None,
    ) -> AggregateBuilder:
        """
        Assembles the full pipeline: pre query, `build_aggregate_builder()`
        stages, sort, pagination and post query, in that order.
        """
        self.logger.debug(f"compute_pipeline started search={search!r} filter={filter!r} sort={sort!r}")
        builder = self.compute_pre_query(search, filter)
        builder.concat(self.build_aggregate_builder())
        for stage in (self.compute_sort(sort), self.compute_option(page, page_size), self.compute_post_query(filter)):
            if stage is not None:
                builder.concat(stage)
        self.logger.debug("compute_pipeline ended")
        return builder

    def build_aggregate_builder(self, *_args: Any) -> AggregateBuilder:
        """
        Returns the transformation stages of this controller.

        Override in subclasses to add `$lookup`, `$addFields`, ... stages. Filter
        keys on fields produced here belong in `post_match_keywords`.
        """
        return AggregateBuilder()

    # ===============================================
    # Maintenance

    def reset_database(self) -> bool:
        """Drops the collection and re-creates its indexes."""
        self.logger.debug("reset_database started")
        self.emit("pre-reset")
        self.collection.drop()
        self.create_indexes()
        self.emit("post-reset")
        self.logger.debug("reset_database ended")
        return True
