from __future__ import annotations

import typing
from typing import Any

import discord
from dacite import from_dict

from pycadence.constants.sources import FALLBACK_SEARCH_ENGINES, SUPPORTED_SOURCES, YOUTUBE_SOURCES
from pycadence.enums.player import SearchResultType
from pycadence.exceptions.node import NoNodeAvailableException
from pycadence.exceptions.player import ClientNotAttachedException
from pycadence.exceptions.track import TrackResolveException
from pycadence.logging import getLogger
from pycadence.nodes.api.responses.track import Track as APITrack
from pycadence.players.tracks.scoring import select_best_candidate
from pycadence.type_hints.dict_typing import JSON_DICT_TYPE

if typing.TYPE_CHECKING:
    from pycadence.core.client import Client, SearchResult
    from pycadence.players.player import Player

LOGGER = getLogger("PyCadence.Track")


class Track:
    """A playable entry of a queue.

    Wraps the node's track descriptor together with what is needed to turn a track from a
    source the node cannot stream directly into one it can.

    Attributes
    ----------
    encoded: :class:`str` | None
        The opaque descriptor the node plays.
    real_uri: :class:`str` | None
        The URI the node can stream, ``None`` until the track has been resolved when the
        source is not directly playable.
    resolved_by_source: :class:`bool`
        Whether the track was already re-resolved because its source is force-resolved.
    requester: Any
        Whoever asked for the track.
    metadata: :class:`dict`
        Free-form data attached by the caller.
    """

    __slots__ = (
        "encoded",
        "identifier",
        "title",
        "author",
        "uri",
        "source_name",
        "length",
        "is_seekable",
        "is_stream",
        "position",
        "artwork_url",
        "isrc",
        "plugin_info",
        "requester",
        "metadata",
        "real_uri",
        "resolved_by_source",
        "_client",
    )

    def __init__(
        self,
        *,
        encoded: str | None = None,
        identifier: str | None = None,
        title: str | None = None,
        author: str | None = None,
        uri: str | None = None,
        source_name: str | None = None,
        length: int | None = 0,
        is_seekable: bool = False,
        is_stream: bool = False,
        position: int = 0,
        artwork_url: str | None = None,
        isrc: str | None = None,
        plugin_info: JSON_DICT_TYPE | None = None,
        requester: Any = None,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        self.encoded = encoded
        self.identifier = identifier
        self.title = title
        self.author = author
        self.uri = uri
        self.source_name = source_name
        self.length = length
        self.is_seekable = is_seekable
        self.is_stream = is_stream
        self.position = position
        self.artwork_url = artwork_url
        self.isrc = isrc
        self.plugin_info = plugin_info or {}
        self.requester = requester
        self.metadata = metadata if metadata is not None else {}
        self.real_uri = uri if source_name in SUPPORTED_SOURCES else None
        self.resolved_by_source = False
        self._client: Client | None = None

    def __repr__(self) -> str:
        return (
            f"<Track title={self.title!r} author={self.author!r} source={self.source_name} "
            f"identifier={self.identifier} ready={self.ready_to_play}>"
        )

    @classmethod
    def from_raw(cls, data: APITrack | JSON_DICT_TYPE, requester: Any = None) -> Track:
        """Build a track from a node track object or its JSON form."""
        if not isinstance(data, APITrack):
            data = from_dict(data_class=APITrack, data=data)
        info = data.info
        return cls(
            encoded=data.encoded,
            identifier=info.identifier,
            title=info.title,
            author=info.author,
            uri=info.uri,
            source_name=info.sourceName,
            length=info.length,
            is_seekable=info.isSeekable,
            is_stream=info.isStream,
            position=info.position,
            artwork_url=info.artworkUrl,
            isrc=info.isrc,
            plugin_info=data.pluginInfo,
            requester=requester,
            metadata=dict(data.userData or {}),
        )

    @property
    def client(self) -> Client:
        if self._client is None:
            raise ClientNotAttachedException("Track is not attached to a client")
        return self._client

    def attach(self, client: Client) -> Track:
        """Bind the client used for resolving and fill in a YouTube thumbnail when there is none."""
        self._client = client
        if self.artwork_url is None and self.identifier and self.source_name in YOUTUBE_SOURCES:
            size = client.options.default_youtube_thumbnail
            self.artwork_url = f"https://img.youtube.com/vi/{self.identifier}/{size}.jpg"
        return self

    @property
    def ready_to_play(self) -> bool:
        """Whether the node can play the track as it is"""
        return all(
            (
                self.encoded,
                self.identifier,
                self.author,
                self.length is not None,
                self.title,
                self.uri,
                self.real_uri,
            )
        )

    @property
    def search_query(self) -> str:
        return " - ".join(part for part in (self.author, self.title) if part)

    async def resolve(self, player: Player | None = None, *, force_resolve: bool = False, overwrite: bool = False) -> Track:
        """|coro|
        Make sure the node can play this track, searching for an equivalent if needed.

        Parameters
        ----------
        player : Player | None
            The player the track is resolved for, its node is used for the search.
        force_resolve : bool
            Search even when the track already looks playable.
        overwrite : bool
            Also replace the title, author, identifier and URI with the match's.

        Returns
        -------
        Track
            This track, updated in place.

        Raises
        ------
        TrackResolveException
            If no usable match was found.
        """
        options = self.client.options
        by_source = self.source_name in options.source_force_resolve
        if not force_resolve and (self.ready_to_play or (by_source and self.resolved_by_source)):
            return self
        if options.track_resolver is not None and await discord.utils.maybe_coroutine(
            options.track_resolver, self, player
        ):
            return self

        result = await self._search(player)
        candidate = select_best_candidate(
            result.tracks,
            title=self.title,
            author=self.author,
            length=self.length,
        )
        if candidate is None:
            raise TrackResolveException(f"No playable match found for {self.search_query!r}")

        self.encoded = candidate.encoded
        self.real_uri = candidate.uri
        self.length = candidate.length
        if overwrite or by_source:
            self.identifier = candidate.identifier
            self.title = candidate.title
            self.author = candidate.author
            self.uri = candidate.uri
            self.is_seekable = candidate.is_seekable
            self.is_stream = candidate.is_stream
            self.artwork_url = candidate.artwork_url or self.artwork_url
        if by_source:
            self.resolved_by_source = True
        LOGGER.verbose("Resolved %r to %s", self.search_query, candidate.uri)
        return self

    async def _search(self, player: Player | None) -> SearchResult:
        client = self.client
        engine = client.options.default_search_engine
        query = self.search_query
        try:
            result = await client.search(query, engine=engine, requester=self.requester, player=player)
        except NoNodeAvailableException:
            raise
        except Exception as exc:
            LOGGER.warning("Search for %r on %s failed: %s", query, engine, exc)
            LOGGER.debug("Search for %r on %s failed", query, engine, exc_info=True)
        else:
            if result.type is not SearchResultType.ERROR:
                return result
            LOGGER.warning("Search for %r on %s returned an error", query, engine)
        fallback = FALLBACK_SEARCH_ENGINES.get(engine, "youtube")
        return await client.search(query, engine=fallback, requester=self.requester, player=player)
