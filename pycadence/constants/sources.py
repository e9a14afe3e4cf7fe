from __future__ import annotations

SOURCE_IDS = {
    "youtube": "yt",
    "youtube_music": "ytm",
    "soundcloud": "sc",
}

# Sources whose track URIs the node can stream without a second lookup
SUPPORTED_SOURCES = frozenset(
    {
        "bandcamp",
        "beam",
        "getyarn",
        "http",
        "local",
        "nico",
        "soundcloud",
        "stream",
        "twitch",
        "vimeo",
        "youtube",
    }
)

FALLBACK_SEARCH_ENGINES = {
    "youtube": "soundcloud",
    "youtube_music": "youtube",
    "soundcloud": "youtube",
}

YOUTUBE_SOURCES = frozenset({"youtube", "youtube_music"})

YOUTUBE_THUMBNAIL_SIZES = frozenset(
    {
        "default",
        "mqdefault",
        "hqdefault",
        "sddefault",
        "maxresdefault",
    }
)
