from collections.abc import Generator
from unittest.mock import MagicMock

from pytest import MonkeyPatch, fixture

mp = MonkeyPatch()
mp.setenv("PRODUCTION", "False")
mp.setenv("TESTING", "True")

from fastapi import FastAPI  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from mongo_controller.controller import Controller, ControllerOptions  # noqa: E402
from mongo_controller.routes import controller_router  # noqa: E402


@fixture
def collection() -> MagicMock:
    """A stand-in for a pymongo collection named `users`."""
    collection = MagicMock()
    collection.name = "users"
    collection.aggregate.return_value = []
    collection.find.return_value = []
    collection.find_one.return_value = None
    return collection


@fixture
def controller(collection: MagicMock) -> Controller:
    options = ControllerOptions(
        skip_index=True,
        search_fields=["name", "email"],
        post_match_keywords=["stats"],
    )
    return Controller(collection, options)


@fixture
def api_client(controller: Controller) -> Generator[TestClient, None, None]:
    app = FastAPI()
    app.include_router(controller_router(controller, "/users"))
    with TestClient(app) as client:
        yield client
