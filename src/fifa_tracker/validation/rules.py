"""Per-table field rules applied before every write.

Rules mirror the columns of the hosted tables. Fields not listed here are
passed to the database unchecked.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

FieldType = Literal["string", "number"]

TEAMS: tuple[str, ...] = ("AEK", "Real", "Ehemalige")
POSITIONS: tuple[str, ...] = ("TH", "LV", "RV", "IV", "ZDM", "ZM", "ZOM", "LM", "RM", "LF", "RF", "ST")
BAN_TYPES: tuple[str, ...] = ("Gelb-Rote Karte", "Rote Karte", "Verletzung")


@dataclass(frozen=True)
class FieldRule:
    required: bool = False
    type: FieldType | None = None
    min_length: int | None = None
    max_length: int | None = None
    min: float | None = None
    max: float | None = None
    enum: tuple[object, ...] | None = None


TableRules = dict[str, FieldRule]

TABLE_RULES: dict[str, TableRules] = {
    "players": {
        "name": FieldRule(required=True, type="string", min_length=1),
        "team": FieldRule(required=True, type="string", enum=TEAMS),
        "value": FieldRule(type="number", min=0),
        "goals": FieldRule(type="number", min=0),
        "position": FieldRule(type="string", enum=POSITIONS),
    },
    "matches": {
        "date": FieldRule(required=True, type="string"),
        "teama": FieldRule(required=True, type="string"),
        "teamb": FieldRule(required=True, type="string"),
        "goalsa": FieldRule(required=True, type="number", min=0),
        "goalsb": FieldRule(required=True, type="number", min=0),
        "goalslista": FieldRule(),
        "goalslistb": FieldRule(),
        "yellowa": FieldRule(type="number", min=0),
        "reda": FieldRule(type="number", min=0),
        "yellowb": FieldRule(type="number", min=0),
        "redb": FieldRule(type="number", min=0),
        "manofthematch": FieldRule(type="string"),
        "prizeaek": FieldRule(type="number"),
        "prizereal": FieldRule(type="number"),
    },
    "bans": {
        "player_id": FieldRule(type="number"),
        "team": FieldRule(required=True, type="string", enum=TEAMS),
        "type": FieldRule(required=True, type="string", enum=BAN_TYPES),
        "totalgames": FieldRule(required=True, type="number", min=0),
        "matchesserved": FieldRule(type="number", min=0),
        "reason": FieldRule(type="string"),
    },
    "transactions": {
        "date": FieldRule(required=True, type="string"),
        "type": FieldRule(required=True, type="string"),
        "team": FieldRule(required=True, type="string"),
        "amount": FieldRule(required=True, type="number"),
        "info": FieldRule(type="string"),
        "match_id": FieldRule(type="number"),
    },
    "finances": {
        "team": FieldRule(required=True, type="string"),
        "balance": FieldRule(type="number"),
        "debt": FieldRule(type="number"),
    },
    "spieler_des_spiels": {
        "name": FieldRule(required=True, type="string", min_length=1),
        "team": FieldRule(required=True, type="string"),
        "count": FieldRule(type="number", min=0),
    },
    "managers": {
        "name": FieldRule(required=True, type="string", min_length=1),
        "gewicht": FieldRule(required=True, type="number", min=40, max=200),
    },
}
