"""Decoders for the text formats found in HLL RCON responses.

The server uses a handful of ad-hoc shapes:

* tab separated lists with a count header and a trailing empty field
  (``get adminids``, ``get vipids``, ``get tempbans`` ...),
* newline separated lists without a header (``rotlist``),
* space separated fixed-arity tuples (one admin or VIP entry),
* ``Key: value`` blocks (``playerinfo``),
* ``a/b`` pairs (``get slots``),
* a free-text ban line that needs a regular expression.

Every decoder either returns complete records or raises ParseError naming
the grammar and the fragment that did not fit.
"""

import re
from datetime import datetime, timedelta
from typing import Callable, Iterable, List, Optional, Sequence, Tuple, TypeVar

from rcon_errors import ParseError
from rcon_maps import Map, decode_map_name
from rcon_records import UNKNOWN_ADMIN, VIP, Admin, Ban, Player, VoteKickThreshold

T = TypeVar("T")

BAN_TIME_FORMAT = "%Y.%m.%d-%H.%M.%S"
# strptime accepts unpadded fields; the server always pads them.
BAN_TIME_PATTERN = re.compile(r"\d{4}\.\d{2}\.\d{2}-\d{2}\.\d{2}\.\d{2}")

BAN_PATTERN = re.compile(
    r'^(.*?) : nickname "(.*?)" banned for (.*?) hours on (.*?) for "(.*?)" by admin "(.*?)"$'
)


def _strip_quotes(value: str) -> str:
    return value.strip(" ").strip('"')


def parse_int(raw: str, grammar: str = "integer") -> int:
    try:
        return int(raw.strip())
    except ValueError as exc:
        raise ParseError(grammar, raw) from exc


# -- delimited enumerations ------------------------------------------------

def parse_tab_list(raw: str, decode_entry: Callable[[str], T], grammar: str = "tab list") -> List[T]:
    """Decode ``count<TAB>entry<TAB>...<TAB>`` into one record per entry.

    The header and the trailing empty field are dropped. A missing trailing
    field means the reply was cut off by the read buffer.
    """
    fields = raw.split("\t")
    if len(fields) < 2:
        raise ParseError(grammar, raw, "missing header or trailing field")
    header, body, trailer = fields[0], fields[1:-1], fields[-1]
    if trailer.strip("\r\n"):
        raise ParseError(grammar, trailer, "response truncated")
    count = header.strip()
    if count.isascii() and count.isdigit() and int(count) != len(body):
        raise ParseError(grammar, raw, f"header announces {count} entries, got {len(body)}")
    return [decode_entry(entry) for entry in body]


def parse_line_list(raw: str, decode_entry: Callable[[str], T]) -> List[T]:
    return [decode_entry(line) for line in raw.split("\n") if line.strip()]


def parse_words(raw: str) -> List[str]:
    """Tab list of plain strings (admin groups, profanities)."""
    return parse_tab_list(raw, lambda entry: entry, grammar="word list")


# -- fixed-arity tuples ----------------------------------------------------

def parse_fields(line: str, arity: int, greedy: bool = False, grammar: str = "fields") -> List[str]:
    """Split ``line`` on single spaces into exactly ``arity`` fields.

    With ``greedy`` the last field keeps any remaining spaces.
    """
    if greedy:
        fields = line.split(" ", arity - 1)
    else:
        fields = line.split(" ")
    if len(fields) != arity or not all(fields):
        raise ParseError(grammar, line, f"expected {arity} fields, got {len(fields)}")
    return fields


def parse_admin(entry: str) -> Admin:
    id64, role, name = parse_fields(entry, 3, grammar="admin")
    return Admin(Player(name=_strip_quotes(name), id64=id64), role)


def parse_vip(entry: str) -> VIP:
    id64, name = parse_fields(entry, 2, greedy=True, grammar="vip")
    return VIP(Player(name=_strip_quotes(name), id64=id64))


def parse_player_entry(entry: str) -> Player:
    """``name : id64`` as listed by ``get playerids``."""
    if ":" not in entry:
        raise ParseError("player", entry, "missing ':'")
    # Names may contain colons, IDs never do.
    name, id64 = entry.rsplit(":", 1)
    name, id64 = name.strip(" "), id64.strip(" ")
    if not id64:
        raise ParseError("player", entry, "missing id")
    return Player(name=name, id64=id64)


def parse_admins(raw: str) -> List[Admin]:
    return parse_tab_list(raw, parse_admin, grammar="admin list")


def parse_vips(raw: str) -> List[VIP]:
    return parse_tab_list(raw, parse_vip, grammar="vip list")


def parse_players(raw: str) -> List[Player]:
    return parse_tab_list(raw, parse_player_entry, grammar="player list")


# -- key:value blocks ------------------------------------------------------

def parse_key_values(
    raw: str,
    min_lines: int = 1,
    required: Optional[int] = None,
    grammar: str = "key/value block",
) -> List[Tuple[str, str]]:
    """Decode ``Key: value`` lines, in order.

    Only the first colon splits a line, so values may contain colons.
    When ``required`` is given, only that many leading lines must be well
    formed; malformed lines after them (a reply cut off by the read buffer)
    are dropped.
    """
    lines = [line for line in raw.split("\n") if line.strip()]
    if len(lines) < min_lines:
        raise ParseError(grammar, raw, f"expected at least {min_lines} lines, got {len(lines)}")
    pairs = []
    for index, line in enumerate(lines):
        key, sep, value = line.partition(":")
        if not sep or not key.strip():
            if required is not None and index >= required:
                continue
            raise ParseError(grammar, line, "missing ':'")
        pairs.append((key.strip(" "), value.strip(" \r")))
    return pairs


def parse_player_info(raw: str) -> Player:
    """``playerinfo`` reply: the first line is the name, the second the ID."""
    pairs = parse_key_values(raw, min_lines=2, required=2, grammar="player info")
    (_, name), (_, id64) = pairs[0], pairs[1]
    if not name or not id64:
        raise ParseError("player info", raw, "empty name or id")
    return Player(name=name, id64=id64)


# -- slash pairs -----------------------------------------------------------

def parse_slash_pair(raw: str, grammar: str = "slash pair") -> Tuple[int, int]:
    parts = raw.strip().split("/")
    if len(parts) != 2:
        raise ParseError(grammar, raw, "expected two fields separated by '/'")
    return parse_int(parts[0], grammar), parse_int(parts[1], grammar)


def parse_slots(raw: str) -> Tuple[int, int]:
    """``get slots`` reply as (players, capacity)."""
    return parse_slash_pair(raw, grammar="slots")


# -- bans ------------------------------------------------------------------

def find_admin(name_or_id: str, admins: Iterable[Admin]) -> Admin:
    for admin in admins:
        if admin.matches(name_or_id):
            return admin
    return UNKNOWN_ADMIN


def parse_ban(entry: str, admins: Sequence[Admin]) -> Ban:
    """Decode one temp/perma ban line, resolving the issuer from ``admins``."""
    matches = BAN_PATTERN.findall(entry.strip("\r\n"))
    if len(matches) != 1:
        raise ParseError("ban", entry)
    id64, name, hours, stamp, reason, issuer = matches[0]

    try:
        duration = timedelta(hours=int(hours))
    except ValueError as exc:
        raise ParseError("ban", hours, "invalid hours") from exc

    if not BAN_TIME_PATTERN.fullmatch(stamp):
        raise ParseError("ban", stamp, "invalid timestamp")
    try:
        banned_at = datetime.strptime(stamp, BAN_TIME_FORMAT)
    except ValueError as exc:
        raise ParseError("ban", stamp, "invalid timestamp") from exc

    return Ban(
        player=Player(name=name, id64=id64),
        admin=find_admin(issuer, admins),
        reason=reason,
        duration=duration,
        time=banned_at,
    )


def parse_bans(raw: str, admins: Sequence[Admin]) -> List[Ban]:
    return parse_tab_list(raw, lambda entry: parse_ban(entry, admins), grammar="ban list")


# -- vote kick thresholds --------------------------------------------------

def parse_vote_kick_thresholds(raw: str) -> List[VoteKickThreshold]:
    """``players,threshold,players,threshold,...`` as sent by the server."""
    values = [value.strip() for value in raw.strip().split(",")]
    if not raw.strip() or len(values) % 2:
        raise ParseError("vote kick threshold", raw, "expected player,threshold pairs")
    numbers = [parse_int(value, "vote kick threshold") for value in values]
    return [VoteKickThreshold(players=p, threshold=t) for p, t in zip(numbers[::2], numbers[1::2])]


def format_vote_kick_thresholds(pairs: Iterable[VoteKickThreshold]) -> str:
    return ",".join(f"{pair.players},{pair.threshold}" for pair in pairs)


# -- maps ------------------------------------------------------------------

def parse_rotation(raw: str) -> List[Map]:
    return parse_line_list(raw, decode_map_name)
