from __future__ import annotations

import re

BASIC_URL_REGEX = re.compile(r"^https?://", re.IGNORECASE)

TOPIC_AUTHOR = re.compile(r"\s-\sTopic$", re.IGNORECASE)
MUSIC_VIDEO_TITLE = re.compile(r"\b(official\s+(music\s+)?video|music\s+video|m/?v)\b", re.IGNORECASE)
AUDIO_TITLE = re.compile(r"\b(audio|lyrics?|lyric\s+video)\b", re.IGNORECASE)
OFFICIAL_AUTHOR = re.compile(r"\b(official|verified)\b", re.IGNORECASE)
ORIGINAL_MIX_TITLE = re.compile(r"\boriginal\s+mix\b", re.IGNORECASE)
DERIVATIVE_TITLE = re.compile(r"\b(remix|repost|cover)\b", re.IGNORECASE)
PREVIEW_TITLE = re.compile(r"\(\s*preview\s*\)", re.IGNORECASE)
