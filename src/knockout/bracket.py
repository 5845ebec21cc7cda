"""
Knockout bracket presentation.

Groups a tournament's knockout matches by stage and builds display-ready data
for templates, the JSON API and the command-line printer.
"""
from typing import Callable, Dict, List, Optional, Tuple

from knockout.models import MatchRecord, Player
from knockout.rounds import (
    DEFAULT_LANGUAGE,
    THIRD_PLACE_STAGE,
    UNRANKED_STAGE,
    MatchLike,
    build_round_index,
    split_third_place,
    stage_label,
    stage_sort_key,
)

TBD_LABEL = 'TBD'
MISSING_SCORE = '-'
MATCH_BADGE_LENGTH = 8

MESSAGES = {
    'mn': {
        'empty': 'Тоглолт хараахан эхлээгүй байна',
        'winner': 'Ялагч',
    },
    'en': {
        'empty': 'No matches have been played yet',
        'winner': 'Winner',
    },
}


def split_score(match: MatchRecord) -> Tuple[str, str]:
    """
    Get per-side score strings for a match.

    A combined score such as "3-1" wins over the per-side fields. Missing
    sides are returned as empty strings.
    """
    if match.score:
        parts = [part.strip() for part in str(match.score).split('-')]
        if len(parts) == 2:
            return parts[0], parts[1]
        return str(match.score).strip(), ''
    return (
        str(match.player1_score) if match.player1_score is not None else '',
        str(match.player2_score) if match.player2_score is not None else '',
    )


def get_match_status(match: MatchRecord) -> str:
    """Return 'completed', 'pending' or 'awaiting_players'."""
    if match.winner is not None:
        return 'completed'
    if match.player1 is not None and match.player2 is not None:
        return 'pending'
    return 'awaiting_players'


class BracketPresenter:
    """
    Display model of a knockout bracket.

    Args:
        matches: raw or normalized match records (dicts or MatchRecord)
        on_player_select: optional callback receiving a player id when a
            player slot is selected; without it every slot is inert
        language: 'mn' or 'en' for stage labels and messages
    """

    def __init__(self, matches: List[MatchLike],
                 on_player_select: Optional[Callable[[str], None]] = None,
                 language: str = DEFAULT_LANGUAGE):
        matches = matches or []
        self.on_player_select = on_player_select
        self.language = language if language in MESSAGES else DEFAULT_LANGUAGE
        self.round_index = build_round_index(matches)
        main_matches, self.third_place_matches = split_third_place(matches)
        self.matches = main_matches + self.third_place_matches

    def stage_of(self, match: MatchRecord) -> str:
        """Get the stage key a normalized match is displayed under."""
        if any(match is m for m in self.third_place_matches):
            return THIRD_PLACE_STAGE
        return self.round_index.get(match.round, UNRANKED_STAGE)

    def group_by_stage(self) -> Dict[str, List[MatchRecord]]:
        """Group matches by stage key, in display order, skipping empty stages."""
        groups = {}
        for match in self.matches:
            groups.setdefault(self.stage_of(match), []).append(match)
        return {stage: groups[stage] for stage in sorted(groups, key=stage_sort_key)}

    def _slot(self, match: MatchRecord, player: Optional[Player], score: str, position: int) -> Dict:
        if player is None:
            return {
                'position': position,
                'player_id': None,
                'name': TBD_LABEL,
                'score': score or MISSING_SCORE,
                'is_tbd': True,
                'is_winner': False,
                'selectable': False,
            }
        return {
            'position': position,
            'player_id': player.id,
            'name': player.name or TBD_LABEL,
            'score': score or MISSING_SCORE,
            'is_tbd': False,
            'is_winner': match.winner is not None and match.winner.id == player.id,
            'selectable': self.on_player_select is not None,
        }

    def _match_display(self, match: MatchRecord) -> Dict:
        score1, score2 = split_score(match)
        winner_line = None
        if match.winner is not None:
            winner_line = f"{MESSAGES[self.language]['winner']}: {match.winner.name}"
        return {
            'id': match.id,
            'badge': match.id[:MATCH_BADGE_LENGTH],
            'round': match.round,
            'score': match.score,
            'status': get_match_status(match),
            'slots': [
                self._slot(match, match.player1, score1, 1),
                self._slot(match, match.player2, score2, 2),
            ],
            'winner_line': winner_line,
        }

    def display(self) -> Dict:
        """
        Build the bracket display data.

        Returns dict with:
        - stages: list of {key, label, matches} in display order
        - is_empty: True when there is no match at all
        - empty_message: text to show instead of the stages
        - total_matches: number of matches shown
        """
        stages = []
        for stage, matches in self.group_by_stage().items():
            stages.append({
                'key': stage,
                'label': stage_label(stage, self.language),
                'matches': [self._match_display(m) for m in matches],
            })
        return {
            'stages': stages,
            'is_empty': not stages,
            'empty_message': MESSAGES[self.language]['empty'],
            'total_matches': len(self.matches),
        }

    def find_match(self, match_id: str) -> Optional[MatchRecord]:
        return next((m for m in self.matches if m.id == match_id), None)

    def select_player(self, match_id: str, player_id: str) -> bool:
        """
        Select a player slot of a match.

        The callback fires only when one was supplied and the player occupies
        a slot of that match. Returns True if the callback was invoked.
        """
        if self.on_player_select is None or not player_id:
            return False
        match = self.find_match(match_id)
        if match is None or match.player_by_id(player_id) is None:
            return False
        self.on_player_select(player_id)
        return True
