from __future__ import annotations

import dataclasses
from typing import Literal, TypeAlias, Union

from pycadence.nodes.api.responses.exceptions import LoadException
from pycadence.nodes.api.responses.playlists import Info
from pycadence.nodes.api.responses.track import Track
from pycadence.type_hints.dict_typing import JSON_DICT_TYPE


@dataclasses.dataclass(repr=True, frozen=True, kw_only=True, slots=True)
class PlaylistData:
    info: Info
    tracks: list[Track]
    pluginInfo: dict | None = None

    def to_dict(self) -> JSON_DICT_TYPE:
        return dataclasses.asdict(self)


@dataclasses.dataclass(repr=True, frozen=True, kw_only=True, slots=True)
class BaseTrackResponse:
    loadType: Literal["track", "playlist", "search", "empty", "error"]
    data: Track | PlaylistData | list[Track] | LoadException | None

    def __bool__(self):
        return True

    def to_dict(self) -> JSON_DICT_TYPE:
        return dataclasses.asdict(self)


@dataclasses.dataclass(repr=True, frozen=True, kw_only=True, slots=True)
class TrackResponse(BaseTrackResponse):
    loadType: Literal["track"]
    data: Track


@dataclasses.dataclass(repr=True, frozen=True, kw_only=True, slots=True)
class PlaylistResponse(BaseTrackResponse):
    loadType: Literal["playlist"]
    data: PlaylistData


@dataclasses.dataclass(repr=True, frozen=True, kw_only=True, slots=True)
class SearchResponse(BaseTrackResponse):
    loadType: Literal["search"]
    data: list[Track]


@dataclasses.dataclass(repr=True, frozen=True, kw_only=True, slots=True)
class EmptyResponse(BaseTrackResponse):
    loadType: Literal["empty"]
    data: None = None

    def __bool__(self):
        return False


@dataclasses.dataclass(repr=True, frozen=True, kw_only=True, slots=True)
class ErrorResponse(BaseTrackResponse):  # noqa
    loadType: Literal["error"]
    data: LoadException

    def __bool__(self):
        return False


LoadTrackResponses: TypeAlias = Union[TrackResponse, PlaylistResponse, EmptyResponse, ErrorResponse, SearchResponse]
