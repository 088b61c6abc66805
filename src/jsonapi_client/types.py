import typing

JSONScalar = typing.Union[bool, int, float, str]
JSONArray = typing.Sequence[typing.Any]
JSONObject = typing.Mapping[str, typing.Any]
MutableJSONObject = typing.MutableMapping[str, typing.Any]
JSONValue = typing.Union[JSONScalar, JSONArray, JSONObject, None]

Document = typing.Dict[str, typing.Any]
"""
A JSON:API top-level document as a plain dictionary, e.g. ``{"data": {...}}``.
"""

PathBuilder = typing.Callable[..., str]
"""
Builds a custom request path from the keyword arguments an operation
was given beyond its own parameters.
"""
