"""Typed view over one collection.

:class:`Collection` pre-fills the collection name and decodes records into a
bound pydantic model. It holds no state of its own beyond that binding; every
call is forwarded to the :class:`~kiwisdk.client.KiwiClient` it was created
from, which keeps ownership of the transport and the auth strategy.
"""

from typing import TYPE_CHECKING, Any, Generic, TypeVar

from pydantic import BaseModel

from .log_config import logger
from .models import CreateResult, ListOptions, ListResult, Record

if TYPE_CHECKING:
    from .client import KiwiClient

T = TypeVar("T", bound=BaseModel)


class Collection(Generic[T]):
    """Binds a collection name and a record model to a client.

    Attributes:
        client: The client every call is forwarded to.
        name: The collection name.
        model: The record model, or None for plain dict records.
    """

    def __init__(
        self, client: "KiwiClient", name: str, model: type[T] | None = None
    ):
        self.client = client
        self.name = name
        self.model = model
        logger.debug(
            f"Collection {name!r} bound to "
            f"{model.__name__ if model else 'dict'} records"
        )

    async def get_list(self, options: ListOptions | None = None) -> ListResult[Any]:
        """Fetches one page, with items decoded into the bound model."""
        item_type: Any = self.model if self.model is not None else Record
        return await self.client.list(
            self.name, options, response_model=ListResult[item_type]
        )

    async def get_one(self, record_id: str) -> T | Record:
        """Fetches one record, decoded into the bound model."""
        return await self.client.get_one(
            self.name, record_id, response_model=self.model
        )

    async def create(self, data: T | Record) -> CreateResult:
        return await self.client.create(self.name, data)

    async def update(self, record_id: str, data: T | Record) -> None:
        await self.client.update(self.name, record_id, data)

    async def delete(self, record_id: str) -> None:
        await self.client.delete(self.name, record_id)


def default_collection(client: "KiwiClient", name: str) -> Collection[Any]:
    """Returns a collection view whose records stay plain dicts."""
    return Collection(client, name)
