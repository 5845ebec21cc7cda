from typing import Dict, Optional


class Player:
    def __init__(self, id, name):
        self.id = id
        self.name = name

    @classmethod
    def from_dict(cls, data) -> Optional['Player']:
        """Build a player from a dict, or None when the slot is empty."""
        if not isinstance(data, dict) or not data.get('id'):
            return None
        return cls(id=str(data['id']), name=data.get('name') or '')

    def to_dict(self) -> Dict:
        return {'id': self.id, 'name': self.name}

    def __eq__(self, other):
        return isinstance(other, Player) and self.id == other.id

    def __hash__(self):
        return hash(self.id)

    def __repr__(self):
        return f"Player(id={self.id}, name={self.name})"


# Keys used by older stored results (camelCase) mapped to attribute names
_KEY_ALIASES = {
    'roundName': 'round_name',
    'player1Score': 'player1_score',
    'player2Score': 'player2_score',
}

_FIELDS = ('id', 'round', 'round_name', 'player1', 'player2', 'winner',
           'score', 'player1_score', 'player2_score')


class MatchRecord:
    def __init__(self, id, round, player1=None, player2=None, winner=None, score=None,
                 round_name=None, player1_score=None, player2_score=None, extra=None):
        self.id = id
        self.round = round  # int once normalized, legacy label before
        self.player1 = player1
        self.player2 = player2
        self.winner = winner
        self.score = score
        self.round_name = round_name
        self.player1_score = player1_score
        self.player2_score = player2_score
        self.extra = extra if extra else {}

    @classmethod
    def from_dict(cls, data: Dict) -> 'MatchRecord':
        """
        Build a match from a stored dict.

        Accepts both snake_case and the camelCase keys of older results.
        Unrecognized keys are kept in ``extra`` so they survive a round-trip.
        """
        values = {}
        extra = {}
        for key, value in data.items():
            key = _KEY_ALIASES.get(key, key)
            if key in _FIELDS:
                values[key] = value
            else:
                extra[key] = value

        return cls(
            id=str(values.get('id', '')),
            round=values.get('round'),
            player1=Player.from_dict(values.get('player1')),
            player2=Player.from_dict(values.get('player2')),
            winner=Player.from_dict(values.get('winner')),
            score=values.get('score'),
            round_name=values.get('round_name'),
            player1_score=values.get('player1_score'),
            player2_score=values.get('player2_score'),
            extra=extra,
        )

    def to_dict(self) -> Dict:
        data = dict(self.extra)
        data['id'] = self.id
        data['round'] = self.round
        for name in ('player1', 'player2', 'winner'):
            player = getattr(self, name)
            if player is not None:
                data[name] = player.to_dict()
        for name in ('score', 'round_name', 'player1_score', 'player2_score'):
            value = getattr(self, name)
            if value is not None:
                data[name] = value
        return data

    def with_round(self, round) -> 'MatchRecord':
        """Return a copy carrying a different round."""
        return MatchRecord(
            id=self.id,
            round=round,
            player1=self.player1,
            player2=self.player2,
            winner=self.winner,
            score=self.score,
            round_name=self.round_name,
            player1_score=self.player1_score,
            player2_score=self.player2_score,
            extra=dict(self.extra),
        )

    def with_winner(self, winner: Optional[Player]) -> 'MatchRecord':
        """Return a copy with the winner replaced."""
        match = self.with_round(self.round)
        match.winner = winner
        return match

    def player_by_id(self, player_id) -> Optional[Player]:
        for player in (self.player1, self.player2):
            if player is not None and player.id == player_id:
                return player
        return None

    def __repr__(self):
        return (f"MatchRecord(id={self.id}, round={self.round!r}, "
                f"player1={self.player1}, player2={self.player2}, winner={self.winner})")
