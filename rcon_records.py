"""Value types decoded from RCON responses.

Richer records hold a ``Player`` (or ``Admin``) rather than repeating its
fields; ``name``/``id64`` accessors keep call sites short.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta


@dataclass(frozen=True)
class Player:
    name: str
    id64: str

    def __str__(self):
        return f"{self.name} ({self.id64})"


@dataclass(frozen=True)
class Admin:
    player: Player
    role: str

    @property
    def name(self) -> str:
        return self.player.name

    @property
    def id64(self) -> str:
        return self.player.id64

    def matches(self, name_or_id: str) -> bool:
        return name_or_id in (self.player.name, self.player.id64)

    def __str__(self):
        return f"{self.player} [{self.role}]"


@dataclass(frozen=True)
class VIP:
    player: Player

    @property
    def name(self) -> str:
        return self.player.name

    @property
    def id64(self) -> str:
        return self.player.id64

    def __str__(self):
        return str(self.player)


UNKNOWN_ADMIN = Admin(Player("unknown admin", "unknown id"), "unknown role")


@dataclass(frozen=True)
class Ban:
    player: Player
    admin: Admin
    reason: str
    duration: timedelta
    time: datetime

    @property
    def expires(self) -> datetime:
        return self.time + self.duration

    def __str__(self):
        stamp = "%b %d %H:%M:%S"
        return (
            f"{self.player} [{self.reason}] from: {self.time.strftime(stamp)} "
            f"until {self.expires.strftime(stamp)} by: {self.admin}"
        )


@dataclass(frozen=True)
class VoteKickThreshold:
    players: int
    threshold: int
