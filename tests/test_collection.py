"""Tests for the typed Collection view."""

import json

import pytest
from pydantic import BaseModel

from kiwisdk.collection import Collection, default_collection
from kiwisdk.exceptions import AuthError, NotFoundError
from kiwisdk.models import ListOptions, ListResult
from kiwisdk.options import with_admin_email_password

RECORDS_URL = "https://kiwi.test/api/collections/posts/records"
LOGIN_URL = "https://kiwi.test/api/admins/auth-with-password"

LIST_BODY = {
    "page": 1,
    "perPage": 2,
    "totalItems": 3,
    "totalPages": 2,
    "items": [{"id": "r1", "title": "one"}, {"id": "r2", "title": "two"}],
}


class Post(BaseModel):
    id: str | None = None
    title: str


def test_client_collection_binds_name_and_model(make_client):
    client = make_client()
    posts = client.collection("posts", Post)
    assert isinstance(posts, Collection)
    assert posts.client is client
    assert posts.name == "posts"
    assert posts.model is Post


def test_default_collection_has_no_model(make_client):
    records = default_collection(make_client(), "posts")
    assert records.model is None


@pytest.mark.asyncio
async def test_get_list_decodes_into_model(make_client, httpx_mock):
    httpx_mock.add_response(method="GET", json=LIST_BODY)

    async with make_client() as client:
        page = await client.collection("posts", Post).get_list(ListOptions(page=1))

    assert isinstance(page, ListResult)
    assert page.items == [Post(id="r1", title="one"), Post(id="r2", title="two")]
    assert page.total_pages == 2
    assert httpx_mock.get_request().url.params["page"] == "1"


@pytest.mark.asyncio
async def test_get_list_without_model_returns_dicts(make_client, httpx_mock):
    httpx_mock.add_response(method="GET", json=LIST_BODY)

    async with make_client() as client:
        page = await default_collection(client, "posts").get_list()

    assert page.items[0] == {"id": "r1", "title": "one"}


@pytest.mark.asyncio
async def test_get_one_decodes_into_model(make_client, httpx_mock):
    httpx_mock.add_response(
        method="GET", url=f"{RECORDS_URL}/r1", json={"id": "r1", "title": "one"}
    )

    async with make_client() as client:
        post = await client.collection("posts", Post).get_one("r1")

    assert post == Post(id="r1", title="one")


@pytest.mark.asyncio
async def test_get_one_not_found(make_client, httpx_mock):
    httpx_mock.add_response(method="GET", url=f"{RECORDS_URL}/nope", status_code=404)

    async with make_client() as client:
        with pytest.raises(NotFoundError):
            await client.collection("posts", Post).get_one("nope")


@pytest.mark.asyncio
async def test_create_matches_client_create(make_client, httpx_mock):
    httpx_mock.add_response(
        method="POST", url=RECORDS_URL, json={"id": "new"}, is_reusable=True
    )
    data = Post(title="hello")

    async with make_client() as client:
        direct = await client.create("posts", data)
        via_collection = await client.collection("posts", Post).create(data)

    assert direct == via_collection
    first, second = httpx_mock.get_requests()
    assert first.method == second.method == "POST"
    assert first.url == second.url
    assert first.content == second.content
    assert dict(first.headers) == dict(second.headers)
    assert json.loads(first.content) == {"id": None, "title": "hello"}


@pytest.mark.asyncio
async def test_update_and_delete_delegate(make_client, httpx_mock):
    httpx_mock.add_response(method="PATCH", url=f"{RECORDS_URL}/r1", json={})
    httpx_mock.add_response(method="DELETE", url=f"{RECORDS_URL}/r1", status_code=204)

    async with make_client() as client:
        posts = client.collection("posts", Post)
        await posts.update("r1", {"title": "patched"})
        await posts.delete("r1")

    patch_request, delete_request = httpx_mock.get_requests()
    assert json.loads(patch_request.content) == {"title": "patched"}
    assert delete_request.method == "DELETE"


@pytest.mark.asyncio
async def test_collection_calls_are_authorization_gated(make_client, httpx_mock):
    httpx_mock.add_response(method="POST", url=LOGIN_URL, status_code=400)

    async with make_client(with_admin_email_password("a@b.c", "pw")) as client:
        with pytest.raises(AuthError):
            await client.collection("posts", Post).get_list()

    assert len(httpx_mock.get_requests()) == 1
