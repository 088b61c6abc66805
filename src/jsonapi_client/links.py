import dataclasses
import typing

from .models import Request
from .types import JSONValue

PAGINATION_KEYS = ("first", "last", "prev", "next")

Requester = typing.Callable[[Request], typing.Awaitable[JSONValue]]


class Links(dict):
    """
    The non-pagination ``links`` of a deserialized resource.
    """


@dataclasses.dataclass(frozen=True)
class LinkCommand:
    """
    A zero-argument command bound to a URL taken from a ``links`` object.

    Awaiting a call issues a GET to the URL through the client's transport and resolves
    to the raw response body:

    .. code-block:: python

       cats = await client.find_all(type="cats")
       next_page = await cats.next()
    """

    url: str
    requester: Requester = dataclasses.field(repr=False, compare=False)

    async def __call__(self) -> JSONValue:
        return await self.requester(Request(url=self.url))


def split_links(
    links: typing.Mapping[str, typing.Any]
) -> typing.Tuple[Links, typing.Dict[str, typing.Any]]:
    """
    Separates pagination links from the others.

    :return: a tuple of the non-pagination links and the pagination links.
    """
    others = Links()
    pagination: typing.Dict[str, typing.Any] = {}
    for k, v in links.items():
        if k in PAGINATION_KEYS:
            pagination[k] = v
        else:
            others[k] = v
    return others, pagination
