import collections.abc
import typing

from .models import Sort
from .types import JSONValue

SortSpec = typing.Sequence[typing.Union[Sort, typing.Mapping[str, typing.Any]]]
FilterSpec = typing.Union[str, typing.Mapping[str, typing.Any], None]


def normalize_base_url(base_url: str) -> str:
    return base_url.rstrip("/") + "/"


class UrlBuilder:
    """
    Composes request URLs of the shape ``base/[path/][id/][action/][?query]``.

    Query parameters are emitted in a fixed order: the sparse fieldset, ``sort``,
    ``filter``, then custom parameters. Values are written verbatim.
    """

    base_url: str

    def _fields_suffix(
        self, type_name: typing.Optional[str], attributes: typing.Sequence[str]
    ) -> str:
        return f"fields[{type_name if type_name is not None else ''}]=" + ",".join(attributes)

    def _sort_suffix(self, sort: SortSpec) -> str:
        return "sort=" + ",".join(Sort.coerce(s).expression for s in sort)

    def _filter_suffixes(self, filter: FilterSpec) -> typing.List[str]:
        if isinstance(filter, collections.abc.Mapping):
            return [f"filter[{k}]={v}" for k, v in filter.items()]
        return [f"filter={filter}"]

    def build(
        self,
        document: JSONValue = None,
        *,
        attributes: typing.Optional[typing.Sequence[str]] = None,
        sort: typing.Optional[SortSpec] = None,
        filter: FilterSpec = None,
        custom_params: typing.Optional[typing.Mapping[str, typing.Any]] = None,
        path: typing.Optional[str] = None,
        action: typing.Optional[str] = None,
        resource_id: typing.Any = None,
    ) -> str:
        """
        Builds a URL.

        :param JSONValue document: the request document; its ``data`` provides the resource
                                   type for sparse fieldsets and the id when ``resource_id``
                                   is not given. Lists of documents provide neither.
        :param Optional[Sequence[str]] attributes: the sparse fieldset.
        :param Optional[SortSpec] sort: sort criteria, in order of precedence.
        :param FilterSpec filter: a raw filter expression or a mapping of filter parameters.
        :param Optional[Mapping[str, Any]] custom_params: additional query parameters.
        :param Optional[str] path: the resource path.
        :param Optional[str] action: a trailing action segment.
        :param Any resource_id: overrides the id taken from the document.
        :return: the URL.
        """
        data: typing.Mapping[str, typing.Any] = {}
        if isinstance(document, collections.abc.Mapping):
            data = document.get("data") or {}

        resource_id = resource_id or data.get("id")

        url = self.base_url
        if path:
            url += f"{path}/"
        if resource_id:
            url += f"{resource_id}/"
        if action:
            url += f"{action}/"

        suffixes: typing.List[str] = []
        if attributes:
            suffixes.append(self._fields_suffix(data.get("type"), attributes))
        if sort:
            suffixes.append(self._sort_suffix(sort))
        if filter:
            suffixes.extend(self._filter_suffixes(filter))
        if custom_params:
            suffixes.extend(f"{k}={v}" for k, v in custom_params.items())

        if suffixes:
            url += "?" + "&".join(suffixes)
        return url

    def __init__(self, base_url: str):
        self.base_url = normalize_base_url(base_url)
