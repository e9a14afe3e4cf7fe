from __future__ import annotations

from typing import TypeVar

from dacite import from_dict

from pycadence.nodes.api.responses import rest_api
from pycadence.type_hints.dict_typing import JSON_DICT_TYPE

PAYLOAD_TYPE = TypeVar("PAYLOAD_TYPE")


def parse_load_result(data: JSON_DICT_TYPE) -> rest_api.LoadTrackResponses:
    """Parse a raw load result into its typed response.

    Parameters
    ----------
    data : dict
        The JSON body returned by the node's track loader.

    Returns
    -------
    LoadTrackResponses
        The typed response matching the ``loadType`` of the payload.
    """
    match data["loadType"]:
        case "error":
            return from_dict(data_class=rest_api.ErrorResponse, data=data)
        case "empty":
            return from_dict(data_class=rest_api.EmptyResponse, data=data)
        case "playlist":
            return from_dict(data_class=rest_api.PlaylistResponse, data=data)
        case "track":
            return from_dict(data_class=rest_api.TrackResponse, data=data)
        case "search":
            return from_dict(data_class=rest_api.SearchResponse, data=data)
        case _:
            raise ValueError(f"Unknown load type {data['loadType']!r}")


def parse_payload(data_class: type[PAYLOAD_TYPE], data: PAYLOAD_TYPE | JSON_DICT_TYPE | None) -> PAYLOAD_TYPE | None:
    """Turn a node event payload into its dataclass, passing through already parsed payloads."""
    if data is None or isinstance(data, data_class):
        return data
    return from_dict(data_class=data_class, data=data)
