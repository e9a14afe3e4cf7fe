from __future__ import annotations

import dataclasses

from pycadence.type_hints.dict_typing import JSON_DICT_TYPE


@dataclasses.dataclass(repr=True, frozen=True, kw_only=True, slots=True)
class Info:
    identifier: str
    isSeekable: bool
    author: str
    length: int
    isStream: bool
    title: str
    position: int = 0
    uri: str | None = None
    sourceName: str | None = None
    artworkUrl: str | None = None
    isrc: str | None = None

    def to_dict(self) -> JSON_DICT_TYPE:
        return dataclasses.asdict(self)


@dataclasses.dataclass(repr=True, frozen=True, kw_only=True, slots=True)
class Track:
    info: Info
    encoded: str | None = None
    pluginInfo: dict | None = None
    userData: dict | None = None

    def to_dict(self) -> JSON_DICT_TYPE:
        return {
            "info": self.info.to_dict(),
            "encoded": self.encoded,
            "pluginInfo": self.pluginInfo,
            "userData": self.userData,
        }
