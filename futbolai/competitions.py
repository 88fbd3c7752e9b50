"""
Competition canonicalization.

Maps free-text competition names from any provider onto a closed set of
identifiers and groups match lists by competition in a stable priority order.
"""
from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .utils import contains_phrase, normalize_text


class CompetitionId(str, Enum):
    CL = "CL"
    EL = "EL"
    CLI = "CLI"
    PD = "PD"
    PL = "PL"
    SA = "SA"
    BL1 = "BL1"
    FL1 = "FL1"
    BSA = "BSA"
    ARG = "ARG"
    MEX = "MEX"
    COL = "COL"
    CHI = "CHI"
    PER = "PER"
    VEN = "VEN"
    CDR = "CDR"
    FAC = "FAC"
    ELC = "ELC"
    CI = "CI"
    DFB = "DFB"
    FRC = "FRC"
    OTHER = "OTHER"


@dataclass(frozen=True)
class Competition:
    id: CompetitionId
    name: str
    country: str
    kind: str  # continental | league | cup
    priority: int


_C = CompetitionId

COMPETITIONS: Dict[CompetitionId, Competition] = {
    c.id: c
    for c in (
        Competition(_C.CL, "UEFA Champions League", "Europe", "continental", 1),
        Competition(_C.EL, "UEFA Europa League", "Europe", "continental", 2),
        Competition(_C.CLI, "Copa Libertadores", "South America", "continental", 3),
        Competition(_C.PD, "La Liga", "Spain", "league", 10),
        Competition(_C.PL, "Premier League", "England", "league", 11),
        Competition(_C.SA, "Serie A", "Italy", "league", 12),
        Competition(_C.BL1, "Bundesliga", "Germany", "league", 13),
        Competition(_C.FL1, "Ligue 1", "France", "league", 14),
        Competition(_C.BSA, "Brasileirão Série A", "Brazil", "league", 15),
        Competition(_C.ARG, "Liga Profesional", "Argentina", "league", 16),
        Competition(_C.MEX, "Liga MX", "Mexico", "league", 17),
        Competition(_C.COL, "Primera A", "Colombia", "league", 18),
        Competition(_C.CHI, "Primera División de Chile", "Chile", "league", 19),
        Competition(_C.PER, "Liga 1", "Peru", "league", 20),
        Competition(_C.VEN, "Primera División de Venezuela", "Venezuela", "league", 21),
        Competition(_C.CDR, "Copa del Rey", "Spain", "cup", 30),
        Competition(_C.FAC, "FA Cup", "England", "cup", 31),
        Competition(_C.ELC, "Carabao Cup", "England", "cup", 32),
        Competition(_C.CI, "Coppa Italia", "Italy", "cup", 33),
        Competition(_C.DFB, "DFB-Pokal", "Germany", "cup", 34),
        Competition(_C.FRC, "Coupe de France", "France", "cup", 35),
    )
}

# Checked top to bottom; specific tournaments precede the generic leagues
# whose fragments they would otherwise hit.
SPECIFIC_FRAGMENTS: Tuple[Tuple[CompetitionId, Tuple[str, ...]], ...] = (
    (_C.EL, ("europa league",)),
    (_C.CLI, ("libertadores",)),
    (_C.CDR, ("copa del rey",)),
    (_C.BSA, ("brasileirao", "brasileiro", "serie a brazil", "brazilian serie a")),
    (_C.ARG, ("liga profesional", "primera division argentina", "argentine primera", "superliga argentina")),
    (_C.MEX, ("liga mx", "liga bbva mx", "mexican primera")),
    (_C.COL, ("primera a", "liga betplay", "categoria primera", "colombian primera")),
    (_C.CHI, ("primera division de chile", "chilean primera", "campeonato nacional")),
    (_C.VEN, ("primera division de venezuela", "venezuelan primera", "liga futve")),
    (_C.PER, ("liga 1", "peruvian primera", "liga1")),
    (_C.FAC, ("fa cup",)),
    (_C.ELC, ("carabao", "league cup", "efl cup")),
    (_C.CI, ("coppa italia",)),
    (_C.DFB, ("dfb-pokal", "dfb pokal")),
    (_C.FRC, ("coupe de france",)),
)

# Names shared by competitions all over the world. Only tried when the name
# carries none of the OTHER_QUALIFIERS below.
GENERIC_FRAGMENTS: Tuple[Tuple[CompetitionId, Tuple[str, ...]], ...] = (
    (_C.CL, ("champions league", "uefa champions", "european cup")),
    (_C.PD, ("la liga", "laliga", "primera division")),
    (_C.PL, ("premier league",)),
    (_C.SA, ("serie a",)),
    (_C.BL1, ("bundesliga",)),
    (_C.FL1, ("ligue 1",)),
)

# Confederation, country and tier markers that put a generic name elsewhere:
# "AFC Champions League", "Russian Premier League", "Primera B Nacional".
OTHER_QUALIFIERS = frozenset({
    # confederations and regions
    "afc", "caf", "concacaf", "ofc", "asian", "african", "arab", "asia", "africa",
    # countries
    "russian", "egyptian", "scottish", "welsh", "irish", "ukrainian", "kazakhstan",
    "armenian", "bangladesh", "canadian", "jamaican", "ghana", "ghanaian", "kenyan",
    "ethiopian", "tanzanian", "ugandan", "zambian", "malawi", "nigerian", "indian",
    "israeli", "lebanese", "maltese", "bosnian", "belarusian", "kuwaiti", "bahraini",
    "syrian", "iraqi", "saudi", "austrian", "swiss", "ecuadorian", "bolivian",
    "paraguayan", "uruguayan", "honduran", "salvadoran", "guatemalan", "panamanian",
    "nicaraguan", "dominican", "ecuador", "bolivia", "paraguay", "uruguay",
    "costa", "honduras", "guatemala", "panama", "salvador", "nicaragua",
    "hong", "singapore", "malaysian", "thai", "burundi", "rwanda", "liberian",
    # tiers, squads and formats
    "b", "2", "ii", "segunda", "nacional", "second", "women", "womens", "women's",
    "femenina", "feminine", "frauen", "u17", "u19", "u20", "u21", "u23", "youth",
    "reserve", "reserves", "futsal", "beach",
})

_BY_NAME: Dict[str, CompetitionId] = {
    normalize_text(c.name): c.id for c in COMPETITIONS.values()
}

PRIORITY_ORDERS: Dict[str, Tuple[CompetitionId, ...]] = {
    # continental -> leagues -> cups
    "default": tuple(sorted(COMPETITIONS, key=lambda cid: COMPETITIONS[cid].priority)),
    # domestic league followed by that country's cups
    "europe": (
        _C.CL, _C.PD, _C.CDR, _C.PL, _C.FAC, _C.ELC, _C.SA, _C.CI,
        _C.BL1, _C.DFB, _C.FL1, _C.FRC,
    ),
    "latam": (
        _C.CLI, _C.BSA, _C.ARG, _C.MEX, _C.COL, _C.CHI, _C.PER, _C.VEN, _C.CL,
    ),
}


def canonicalize(name: Any) -> CompetitionId:
    """
    Map a free-text competition name to its CompetitionId.

    Canonical ids and display names match exactly first, so canonicalizing an
    id returns the same id. Unmatched or empty input maps to OTHER.
    """
    if isinstance(name, CompetitionId):
        return name
    if name is None:
        return CompetitionId.OTHER
    raw = str(name).strip()
    if not raw:
        return CompetitionId.OTHER

    upper = raw.upper()
    if upper in CompetitionId.__members__:
        return CompetitionId[upper]

    text = normalize_text(raw)
    exact = _BY_NAME.get(text)
    if exact is not None:
        return exact

    for cid, fragments in SPECIFIC_FRAGMENTS:
        for fragment in fragments:
            if contains_phrase(text, fragment):
                return cid
    if any(token in OTHER_QUALIFIERS for token in text.split()):
        return CompetitionId.OTHER
    for cid, fragments in GENERIC_FRAGMENTS:
        for fragment in fragments:
            if contains_phrase(text, fragment):
                return cid
    return CompetitionId.OTHER


def competition_info(cid: Any) -> Optional[Competition]:
    """Metadata for a known id (or free-text name); None for OTHER."""
    resolved = canonicalize(cid)
    return COMPETITIONS.get(resolved)


def priority_order(region: Optional[str] = None) -> List[CompetitionId]:
    """Known ids in display order for `region`; ids the region omits follow in default order."""
    preferred = PRIORITY_ORDERS.get((region or "default").lower(), PRIORITY_ORDERS["default"])
    ordered = list(preferred)
    ordered.extend(cid for cid in PRIORITY_ORDERS["default"] if cid not in preferred)
    return ordered


def group_by_competition(matches: Iterable[Dict[str, Any]], region: Optional[str] = None) -> "OrderedDict[str, Dict[str, Any]]":
    """
    Group match dicts by competition.

    Known competitions come first in the region's priority order; every
    unmatched competition name gets its own bucket, keyed by the original
    name, after them. Matches keep their input order inside a bucket.
    """
    known: Dict[CompetitionId, List[Dict[str, Any]]] = {}
    unknown: "OrderedDict[str, List[Dict[str, Any]]]" = OrderedDict()

    for match in matches:
        raw_name = match.get("competition") or ""
        cid = canonicalize(match.get("competition_id") or raw_name)
        if cid is CompetitionId.OTHER:
            unknown.setdefault(raw_name or CompetitionId.OTHER.value, []).append(match)
        else:
            known.setdefault(cid, []).append(match)

    grouped: "OrderedDict[str, Dict[str, Any]]" = OrderedDict()
    for cid in priority_order(region):
        bucket = known.get(cid)
        if not bucket:
            continue
        info = COMPETITIONS[cid]
        grouped[cid.value] = {
            "league_name": info.name,
            "country": info.country,
            "matches": bucket,
            "total_matches": len(bucket),
        }
    for raw_name, bucket in unknown.items():
        grouped[raw_name] = {
            "league_name": raw_name,
            "country": "International",
            "matches": bucket,
            "total_matches": len(bucket),
        }
    return grouped
