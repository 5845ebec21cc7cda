"""
Knockout round normalization and the mapping from rounds to bracket stages.

Stored results mix integer rounds with legacy localized stage names such as
"Хагас финал". Everything here turns those into sequential integer rounds
(earliest elimination round = 1) and maps integer rounds to stage keys
('final', 'semifinal', 'quarterfinal', 'round16', ...) for display.
"""
import logging
from typing import Dict, Iterable, List, Optional, Tuple, Union

from knockout.models import MatchRecord

logger = logging.getLogger(__name__)

THIRD_PLACE_LABEL = '3-р байрын тоглолт'
THIRD_PLACE_MATCH_ID = 'third_place_playoff'

# Legacy round labels, earliest elimination round first
LEGACY_ROUND_ORDER = [
    '1/64 финал',
    '1/32 финал',
    '1/16 финал',
    '1/8 финал',
    'Дөрөвний финал',
    'Хагас финал',
    'Финал',
]

# Stage keys in the same order as LEGACY_ROUND_ORDER
STAGE_ORDER = [
    'round128',
    'round64',
    'round32',
    'round16',
    'quarterfinal',
    'semifinal',
    'final',
]

THIRD_PLACE_STAGE = 'third_place'
UNRANKED_STAGE = 'unranked'

_ENGLISH_ROUND_NAMES = [
    'Round of 128',
    'Round of 64',
    'Round of 32',
    'Round of 16',
    'Quarterfinal',
    'Semifinal',
    'Final',
]

_LABEL_TO_STAGE = {}
for _names in (LEGACY_ROUND_ORDER, _ENGLISH_ROUND_NAMES):
    for _name, _stage in zip(_names, STAGE_ORDER):
        _LABEL_TO_STAGE[_name.casefold()] = _stage

_THIRD_PLACE_LABELS = {
    THIRD_PLACE_LABEL.casefold(),
    'third place',
    '3rd place',
    'third place playoff',
}

STAGE_LABELS = {
    'mn': {
        'final': 'Финал',
        'semifinal': 'Хагас финал',
        'quarterfinal': 'Дөрөвний финал',
        THIRD_PLACE_STAGE: THIRD_PLACE_LABEL,
        UNRANKED_STAGE: 'Бусад',
    },
    'en': {
        'final': 'Final',
        'semifinal': 'Semifinal',
        'quarterfinal': 'Quarterfinal',
        THIRD_PLACE_STAGE: 'Third Place',
        UNRANKED_STAGE: 'Other',
    },
}
DEFAULT_LANGUAGE = 'mn'

MatchLike = Union[MatchRecord, Dict]


def _as_record(match: MatchLike) -> MatchRecord:
    if isinstance(match, MatchRecord):
        return match
    return MatchRecord.from_dict(match)


def _round_label(value) -> Optional[str]:
    """Return the stripped label if the round is a non-empty string."""
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _numeric_round(value) -> Optional[int]:
    """Return the round as an int if it is already numeric, else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def stage_for_label(label) -> Optional[str]:
    """Return the stage key of a known round label, or None."""
    if not isinstance(label, str):
        return None
    return _LABEL_TO_STAGE.get(label.strip().casefold())


def is_third_place(match: MatchLike) -> bool:
    """True for the 3rd-place playoff (sentinel id or legacy label)."""
    match = _as_record(match)
    if match.id == THIRD_PLACE_MATCH_ID:
        return True
    label = _round_label(match.round)
    return label is not None and label.casefold() in _THIRD_PLACE_LABELS


def _rank_round_labels(matches: Iterable[MatchRecord]) -> Tuple[Dict[str, int], Dict[int, str]]:
    """
    Assign sequential round numbers to the distinct labels in ``matches``.

    Known labels are ordered by canonical stage; labels naming the same stage
    (e.g. "Финал" and "Final") share a number. Unknown labels come after all
    known stages in first-seen order.

    Returns:
        (label -> round number, round number -> stage key)
    """
    labels = []
    for match in matches:
        label = _round_label(match.round)
        if label is not None and label not in labels:
            labels.append(label)

    known_stages = sorted(
        {stage_for_label(label) for label in labels if stage_for_label(label)},
        key=STAGE_ORDER.index
    )
    unknown_labels = [label for label in labels if stage_for_label(label) is None]
    if unknown_labels:
        logger.debug("Unranked round labels placed after known stages: %s", unknown_labels)

    round_map = {}
    stage_by_round = {}
    for number, stage in enumerate(known_stages, start=1):
        stage_by_round[number] = stage
    for offset, label in enumerate(unknown_labels, start=1):
        stage_by_round[len(known_stages) + offset] = UNRANKED_STAGE

    for label in labels:
        stage = stage_for_label(label)
        if stage:
            round_map[label] = known_stages.index(stage) + 1
        else:
            round_map[label] = len(known_stages) + unknown_labels.index(label) + 1

    return round_map, stage_by_round


def _resolve_round(value, round_map: Dict[str, int]) -> int:
    number = _numeric_round(value)
    if number is not None:
        return number
    label = _round_label(value)
    if label is None:
        return 0
    return round_map.get(label, 0)


def normalize_knockout_matches(matches: List[MatchLike]) -> List[MatchRecord]:
    """
    Convert legacy round labels to sequential numeric rounds starting from 1.

    Numeric rounds are kept as they are. The 3rd-place playoff gets the final's
    round number unless it already has a numeric round. Matches keep their
    input order, with 3rd-place matches moved to the end. Input records are
    never modified.
    """
    if not matches:
        return []

    records = [_as_record(m) for m in matches]
    third_place = [m for m in records if is_third_place(m)]
    others = [m for m in records if not is_third_place(m)]

    round_map, _ = _rank_round_labels(others)
    normalized = [m.with_round(_resolve_round(m.round, round_map)) for m in others]

    total_rounds = len(set(round_map.values())) or 1
    normalized_third = []
    for match in third_place:
        number = _numeric_round(match.round)
        normalized_third.append(match.with_round(number if number is not None else total_rounds))

    return normalized + normalized_third


def split_third_place(matches: List[MatchLike]) -> Tuple[List[MatchRecord], List[MatchRecord]]:
    """
    Normalize matches and separate the 3rd-place playoffs from the main bracket.

    A playoff named only by its label cannot be told apart once its round is a
    number, so it is classified on the raw records. Normalization puts those
    matches last.

    Returns:
        (main bracket matches, 3rd-place matches), both normalized
    """
    normalized = normalize_knockout_matches(matches)
    third_count = sum(1 for m in matches or [] if is_third_place(m))
    split = len(normalized) - third_count
    return normalized[:split], normalized[split:]


def stage_for_round(round_number: int, final_round: Optional[int]) -> str:
    """
    Map an integer round to a stage key, counting back from the final.

    The final round is 'final', the one before it 'semifinal', then
    'quarterfinal', 'round16', 'round32' and so on. Rounds that are not
    positive or come after the final are 'unranked'.
    """
    if final_round is None or round_number <= 0 or round_number > final_round:
        return UNRANKED_STAGE
    distance = final_round - round_number
    if distance < len(STAGE_ORDER):
        return STAGE_ORDER[-1 - distance]
    return f"round{2 ** (distance + 1)}"


def build_round_index(matches: List[MatchLike]) -> Dict[int, str]:
    """
    Build the round number -> stage key lookup for a raw match list.

    Rounds numbered from labels take the stage the label names. Rounds that
    were numeric already are placed relative to the highest numeric round of
    the main bracket.
    """
    records = [_as_record(m) for m in matches]
    others = [m for m in records if not is_third_place(m)]
    _, stage_by_round = _rank_round_labels(others)

    numeric_rounds = set()
    for match in others:
        number = _numeric_round(match.round)
        if number is not None:
            numeric_rounds.add(number)
    positive = [n for n in numeric_rounds if n > 0]
    final_round = max(positive) if positive else None

    index = {n: stage_for_round(n, final_round) for n in numeric_rounds}
    index.update(stage_by_round)
    return index


def stage_size(stage: str) -> Optional[int]:
    """Number of players entering a main-bracket stage, None for side stages."""
    if stage == 'final':
        return 2
    if stage == 'semifinal':
        return 4
    if stage == 'quarterfinal':
        return 8
    if stage.startswith('round') and stage[5:].isdigit():
        return int(stage[5:])
    return None


def stage_sort_key(stage: str) -> Tuple[int, int]:
    """Sort key placing early rounds first, then the final, 3rd place, unranked."""
    size = stage_size(stage)
    if size is not None:
        return (0, -size)
    if stage == THIRD_PLACE_STAGE:
        return (1, 0)
    return (2, 0)


def stage_label(stage: str, language: str = DEFAULT_LANGUAGE) -> str:
    """Get the display label of a stage."""
    labels = STAGE_LABELS.get(language, STAGE_LABELS[DEFAULT_LANGUAGE])
    if stage in labels:
        return labels[stage]
    size = stage_size(stage)
    if size is None:
        return labels[UNRANKED_STAGE]
    if language == 'en':
        return f"Round of {size}"
    return f"1/{size // 2} финал"
