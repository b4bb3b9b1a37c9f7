import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from pyheadlines import (
    FetchFailure,
    FilterSpec,
    Headline,
    HeadlinesRepository,
    NotConnected,
    NotFoundFailure,
    Page,
    PageRequest,
    get_database,
)
from pyheadlines.integrations.fastapi import (
    PageParams,
    PaginatedResponse,
    init_app,
    register_exception_handlers,
)


def build_app(repository: HeadlinesRepository) -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)

    @app.get("/headlines", response_model=PaginatedResponse[Headline])
    async def list_headlines(params: PageParams = Depends()):
        page = await repository.get_headlines(params.to_request())
        return PaginatedResponse[Headline].from_page(page)

    @app.get("/headlines/{id}")
    async def get_headline(id: str):
        return await repository.require_headline(id)

    return app


@pytest.fixture
def client(repository):
    return TestClient(build_app(repository))


def test_paginated_response_from_page(make_headlines):
    page = Page.from_items(make_headlines(2), limit=2)
    response = PaginatedResponse[Headline].from_page(page)
    assert response.items == page.items
    assert response.cursor == "h001"
    assert response.has_more is True


def test_page_params_build_request():
    params = PageParams(limit=10, cursor="h005", category=["a", "b"], event_country=["US"])
    assert params.to_request() == PageRequest(
        limit=10,
        cursor="h005",
        filter=FilterSpec(categories={"a", "b"}, event_countries={"US"}),
    )


def test_page_params_default_limit():
    assert PageParams().limit is None


@pytest.mark.parametrize("limit", ["0", "-3", "101"])
def test_out_of_range_limit_rejected(client, source, limit):
    response = client.get("/headlines", params={"limit": limit})

    assert response.status_code == 422
    source.list.assert_not_awaited()


def test_max_page_size_accepted(client, source):
    source.list.return_value = []

    response = client.get("/headlines", params={"limit": "100"})

    assert response.status_code == 200
    source.list.assert_awaited_once_with(limit=100, cursor=None)


def test_list_endpoint_passes_repeated_filters(client, source, make_headlines):
    source.list.return_value = make_headlines(2)

    response = client.get(
        "/headlines",
        params=[("limit", "2"), ("category", "tech"), ("category", "science"), ("source", "bbc")],
    )

    assert response.status_code == 200
    body = response.json()
    assert [item["id"] for item in body["items"]] == ["h000", "h001"]
    assert body["cursor"] == "h001"
    assert body["has_more"] is True
    source.list.assert_awaited_once_with(
        limit=2,
        cursor=None,
        categories=frozenset({"tech", "science"}),
        sources=frozenset({"bbc"}),
    )


def test_not_found_maps_to_404(client, source):
    source.get.side_effect = NotFoundFailure("Headline with id 'x' not found")

    response = client.get("/headlines/x")

    assert response.status_code == 404
    assert response.json() == {
        "detail": "Headline with id 'x' not found",
        "kind": "NotFoundFailure",
    }


def test_fetch_failure_maps_to_500(client, source):
    source.list.side_effect = FetchFailure("backend down")

    response = client.get("/headlines")

    assert response.status_code == 500
    assert response.json()["kind"] == "FetchFailure"


def test_init_app_manages_connection():
    app = init_app(FastAPI(), "mongodb://localhost:27017/pyheadlines_app", alias="api")

    with TestClient(app):
        assert get_database("api").name == "pyheadlines_app"

    with pytest.raises(NotConnected):
        get_database("api")
