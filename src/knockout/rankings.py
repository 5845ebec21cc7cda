"""
Final placings derived from the knockout bracket.
"""
from typing import Dict, List, Optional

from knockout.models import MatchRecord
from knockout.rounds import MatchLike, build_round_index, split_third_place

MEDALS = {1: '🥇', 2: '🥈', 3: '🥉'}


def find_final_match(matches: List[MatchLike]) -> Optional[MatchRecord]:
    """Return the final of the main bracket, or None if there is none."""
    round_index = build_round_index(matches)
    main_matches, _ = split_third_place(matches)
    return next((m for m in main_matches if round_index.get(m.round) == 'final'), None)


def find_third_place_match(matches: List[MatchLike]) -> Optional[MatchRecord]:
    _, third_place = split_third_place(matches)
    return third_place[0] if third_place else None


def _ranking(position: int, player) -> Dict:
    return {'position': position, 'player': player.to_dict(), 'medal': MEDALS[position]}


def get_final_rankings(matches: List[MatchLike]) -> List[Dict]:
    """
    Get the podium once the deciding matches have winners.

    Position 1 and 2 come from the final, position 3 from the 3rd-place
    playoff. A position is left out while its match has no winner.
    """
    rankings = []

    final_match = find_final_match(matches)
    if final_match is not None and final_match.winner is not None:
        rankings.append(_ranking(1, final_match.winner))
        runner_up = None
        if final_match.player1 is not None and final_match.player1.id == final_match.winner.id:
            runner_up = final_match.player2
        elif final_match.player2 is not None and final_match.player2.id == final_match.winner.id:
            runner_up = final_match.player1
        if runner_up is not None:
            rankings.append(_ranking(2, runner_up))

    third_place_match = find_third_place_match(matches)
    if third_place_match is not None and third_place_match.winner is not None:
        rankings.append(_ranking(3, third_place_match.winner))

    return rankings
