"""
Prompt builders and reply cleaning for the AI-assisted features.

Genre ids follow the content catalogue's public genre list (movie and TV
ids share one namespace).
"""

from __future__ import annotations

import json
import re
from typing import Any, Dict, List, Optional, Sequence, Tuple

GENRE_NAMES: Dict[int, str] = {
    # Movie genres
    28: "Action",
    12: "Adventure",
    16: "Animation",
    35: "Comedy",
    80: "Crime",
    99: "Documentary",
    18: "Drama",
    10751: "Family",
    14: "Fantasy",
    36: "History",
    27: "Horror",
    10402: "Music",
    9648: "Mystery",
    10749: "Romance",
    878: "Science Fiction",
    10770: "TV Movie",
    53: "Thriller",
    10752: "War",
    37: "Western",
    # TV-only genres
    10759: "Action & Adventure",
    10762: "Kids",
    10763: "News",
    10764: "Reality",
    10765: "Sci-Fi & Fantasy",
    10766: "Soap",
    10767: "Talk",
    10768: "War & Politics",
}

UNTITLED_ROW_NAME = "Untitled Row"

AVAILABLE_EMOJIS: Dict[str, Tuple[str, ...]] = {
    "entertainment": (
        "🎬", "🎭", "🍿", "🎪", "📽️", "🎞️", "📺", "📻", "🎵",
        "🎶", "🎤", "🎧", "🎸", "🎺", "🎹", "🎼", "🎨", "📱",
    ),
    "fantasy": (
        "🦸", "🦹", "🤖", "👽", "🐉", "🦄", "💀", "👻", "🚀",
        "🛸", "🌍", "🌕", "👾", "🕷️", "🦇", "🧛", "🧟", "🧙",
    ),
    "achievements": (
        "🏆", "🥇", "🎖️", "🏅", "👑", "💎", "⚡", "💥", "🔥",
        "⭐", "🌟", "✨", "💫", "🎯", "💪", "🔱", "⚜️", "🌈",
    ),
    "action": (
        "⚔️", "🗡️", "🏹", "🔫", "💣", "🧨", "🎲", "🃏", "🎰",
        "🎮", "🕹️", "🎳", "⚽", "🏀", "🎾", "⛳", "🏒", "🥊",
    ),
}

ALL_EMOJIS: Tuple[str, ...] = tuple(e for group in AVAILABLE_EMOJIS.values() for e in group)

AVAILABLE_COLORS: Tuple[str, ...] = (
    "#ef4444",  # red
    "#dc2626",  # dark red
    "#f97316",  # orange
    "#f43f5e",  # rose
    "#fbbf24",  # amber/gold
    "#facc15",  # yellow
    "#eab308",  # dark yellow
    "#f59e0b",  # amber
    "#2dd4bf",  # teal
    "#22d3ee",  # cyan
    "#38bdf8",  # sky blue
    "#3b82f6",  # blue
    "#6366f1",  # indigo
    "#8b5cf6",  # violet
    "#a855f7",  # purple
    "#d946ef",  # fuchsia
)

DEFAULT_EMOJI = "📺"
DEFAULT_COLOR = "#ef4444"

_MEDIA_TYPE_TEXT = {"movie": "movies", "tv": "TV shows", "both": "movies and TV shows"}
_CODE_FENCE_RE = re.compile(r"```(?:json)?\s*", re.IGNORECASE)


def genre_names(genre_ids: Sequence[int]) -> List[str]:
    return [GENRE_NAMES.get(gid, f"Genre {gid}") for gid in genre_ids]


def build_row_name_prompt(genre_ids: Sequence[int], genre_logic: str, media_type: str) -> str:
    names = ", ".join(genre_names(genre_ids))
    logic_text = "that are ALL of" if genre_logic == "AND" else "that are ANY of"
    media_text = _MEDIA_TYPE_TEXT.get(media_type, "movies and TV shows")

    return f"""You are a streaming-service content curator who writes short, witty row names that surprise and delight members.

The row shows {media_text} {logic_text} these genres: {names}.

Requirements:
- ULTRA SHORT (1-3 words MAXIMUM)
- Bold and surprising, like something a cool friend would say, not corporate marketing
- Pop culture, music, sports or food slang is welcome ("Certified Bangers", "Chef's Kiss", "No Skips", "Built Different")

Do NOT use generic phrases like "Best of [X]", "[Genre] Picks", "Top [Genre]" or "[Genre] Essentials".

Response: just the name, nothing else."""


def clean_row_name(text: Optional[str]) -> str:
    """
    Strip whitespace, surrounding quotes and bold markers from a model reply.
    """
    name = (text or "").strip()
    name = re.sub(r"^[\"']|[\"']$", "", name)
    name = name.replace("**", "").strip()
    return name or UNTITLED_ROW_NAME


def default_row_name(genre_ids: Sequence[int]) -> str:
    """
    Non-AI name used when generation is unavailable.
    """
    names = genre_names(genre_ids)[:2]
    if not names:
        return UNTITLED_ROW_NAME
    return " & ".join(names)


def build_style_prompt(name: str, content_titles: Sequence[str]) -> str:
    context = ""
    if content_titles:
        context = f"\n\nThis collection contains: {', '.join(content_titles[:10])}"

    return f"""You are a design expert helping choose an emoji icon and color for a movie/TV collection.

Collection Name: "{name}"{context}

Available Emojis:
{' '.join(ALL_EMOJIS)}

Available Colors (hex codes):
{', '.join(AVAILABLE_COLORS)}

IMPORTANT: Return ONLY valid JSON. Do NOT wrap in markdown code blocks.

Choose ONE emoji and ONE color from the lists above that best represent this collection's theme and mood.

Return JSON in this exact format:
{{
  "emoji": "🎬",
  "color": "#ef4444",
  "reasoning": "Brief explanation of why these choices fit"
}}

Guidelines:
- Pick an emoji that captures the collection's genre, mood, or theme
- Pick a color that conveys the right emotion (exciting = red/orange, calm = blue/teal)
- The reasoning should be 1-2 sentences max"""


def strip_code_fences(text: str) -> str:
    return _CODE_FENCE_RE.sub("", text).strip()


def parse_style_reply(text: Optional[str]) -> Optional[Dict[str, Any]]:
    """
    Decode the model's JSON reply and coerce emoji/color into the allowed
    sets. Returns None when the reply is not a JSON object.
    """
    if not text:
        return None
    try:
        parsed = json.loads(strip_code_fences(text))
    except ValueError:
        return None
    if not isinstance(parsed, dict):
        return None

    emoji = parsed.get("emoji")
    color = parsed.get("color")
    reasoning = parsed.get("reasoning")
    return {
        "emoji": emoji if emoji in ALL_EMOJIS else DEFAULT_EMOJI,
        "color": color if color in AVAILABLE_COLORS else DEFAULT_COLOR,
        "reasoning": reasoning if isinstance(reasoning, str) else None,
    }


def sanitize_titles(titles: Sequence[Any], max_length: int = 100) -> List[str]:
    cleaned: List[str] = []
    for title in titles:
        if not isinstance(title, str):
            continue
        title = title.strip()
        if title:
            cleaned.append(title[:max_length])
    return cleaned
