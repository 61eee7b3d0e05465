"""Shared team name normalization used for lookup matching.

Source tables spell the same franchise differently ("KC", "Kansas City
Chiefs", " kansas city chiefs ", "Washington Football Team" with a
non-breaking space).  Every lookup key and every value being resolved goes
through ``normalize_team_key`` so both sides of the match agree.
"""

from __future__ import annotations

import html as _html
import re
import unicodedata


def normalize_team_key(name) -> str:
    """Convert an arbitrary team name or code to a comparison key.

    Steps:
    1. Decode HTML entities (``&amp;`` → ``&``)
    2. NFKD-normalize Unicode and strip combining marks
    3. Collapse runs of whitespace (including non-breaking spaces)
    4. Uppercase

    Examples::

        >>> normalize_team_key("  Kansas   City Chiefs ")
        'KANSAS CITY CHIEFS'
        >>> normalize_team_key("kc")
        'KC'
    """
    if name is None:
        return ""
    if isinstance(name, float) and name != name:
        return ""
    s = _html.unescape(str(name))
    s = unicodedata.normalize("NFKD", s)
    s = "".join(ch for ch in s if not unicodedata.combining(ch))
    s = re.sub(r"\s+", " ", s).strip()
    return s.upper()


def normalize_column_name(name: str) -> str:
    """Lowercase a column header and replace separators with ``_``.

    Example: ``"Pick %"`` → ``pick``, ``"Team 1"`` → ``team_1``
    """
    s = str(name).strip().lower()
    s = re.sub(r"[^a-z0-9]+", "_", s)
    return s.strip("_")
