import re
from typing import Dict, List

# Databank slugs that slugify() gets wrong. Exact match on the raw SWAPI
# name, looked up before the generic transform.
DATABANK_SLUG_OVERRIDES: Dict[str, str] = {
    "CR90 corvette": "cr90-corvette",
    "Sentinel-class landing craft": "sentinel-class-landing-craft",
    "Y-wing": "y-wing-starfighter",
    "X-wing": "x-wing-starfighter",
    "TIE Advanced x1": "tie-advanced-x1",
    "Rebel transport": "rebel-transport",
    "Calamari Cruiser": "mon-calamari-cruiser",
    "A-wing": "a-wing-starfighter",
    "Droid control ship": "droid-control-ship",
    "J-type diplomatic barge": "j-type-diplomatic-barge",
    "Republic Assault ship": "republic-assault-ship",
    "Trade Federation cruiser": "trade-federation-cruiser",
    "Theta-class T-2c shuttle": "theta-class-t-2c-shuttle",
    "Naboo star skiff": "naboo-star-skiff",
    "Jedi Interceptor": "jedi-interceptor",
    "arc-170": "arc-170-starfighter",
    "Banking clan frigte": "banking-clan-frigate",  # SWAPI typo
    "Belbullab-22 starfighter": "belbullab-22-starfighter",
    "V-wing": "v-wing-starfighter",
}

SLUG_SUFFIXES = ("-class", "-starfighter", "-fighter")

# Straight and curly apostrophes, plus the UTF-8-read-as-cp1252 curly form.
_APOSTROPHE_RE = re.compile("(?:â€™|[’'])")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def slugify(value: str) -> str:
    s = value.lower().replace("&", "and")
    s = _APOSTROPHE_RE.sub("", s)
    s = _NON_ALNUM_RE.sub("-", s)
    return s.strip("-")


def databank_slug(name: str) -> str:
    """Override slug when the name is listed, generic slug otherwise."""
    override = DATABANK_SLUG_OVERRIDES.get(name)
    if override:
        return override
    return slugify(name)


def slug_candidates(slug: str) -> List[str]:
    """
    The slug itself followed by one variant per trailing suffix removed.

    Empty and repeated candidates are dropped, order is kept.
    """
    candidates = [slug]
    for suffix in SLUG_SUFFIXES:
        candidates.append(slug[: -len(suffix)] if slug.endswith(suffix) else slug)

    seen = set()
    result = []
    for c in candidates:
        if c and c not in seen:
            seen.add(c)
            result.append(c)
    return result
