import logging
from dataclasses import dataclass

log = logging.getLogger(__name__)

WARFARE = "Warfare"
OFFENSIVE = "Offensive"

LOCATIONS: dict[str, str] = {
    "carentan": "Carentan",
    "driel": "Driel",
    "elalamein": "El Alamein",
    "elsenbornridge": "Elsenborn Ridge",
    "foy": "Foy",
    "hill400": "Hill 400",
    "hurtgenforest": "Hurtgen Forest",
    "kharkov": "Kharkov",
    "kursk": "Kursk",
    "mortain": "Mortain",
    "omahabeach": "Omaha Beach",
    "purpleheartlane": "Purple Heart Lane",
    "remagen": "Remagen",
    "stalingrad": "Stalingrad",
    "stmariedumont": "St. Marie Du Mont",
    "stmereeglise": "St. Mere Eglise",
    "tobruk": "Tobruk",
    "utahbeach": "Utah Beach",
}

SIDES: dict[str, str] = {
    "us": "United States",
    "ger": "Germany",
    "rus": "Russia",
    "gb": "Great Britain",
}


@dataclass(frozen=True)
class Map:
    location: str
    type: str
    side: str
    name: str

    def __str__(self):
        s = f"{self.location} - {self.type}"
        if self.side:
            s = f"{s} ({self.side})"
        return s


def _humanize(token: str) -> str:
    return token.replace("-", " ").title()


def location(token: str) -> str:
    return LOCATIONS.get(token.lower()) or _humanize(token)


def side(token: str) -> str:
    return SIDES.get(token.lower()) or _humanize(token)


def decode_map_name(raw: str) -> Map:
    """Turn a server map name like ``stmariedumont_off_us`` into a Map.

    Two segments are a Warfare layer, three an Offensive layer whose last
    segment is the attacking side.
    """
    name = raw.strip()
    parts = name.split("_")
    m_type, m_side = "", ""
    if len(parts) == 2:
        m_type = WARFARE
    elif len(parts) == 3:
        # Only the segment count is used: ``stmereeglise_warfare_night`` is
        # also decoded as Offensive, with side "Night".
        m_type = OFFENSIVE
        m_side = side(parts[2])
    else:
        log.debug("Map name %r has no recognised layer suffix", name)
    return Map(location=location(parts[0]), type=m_type, side=m_side, name=name)
