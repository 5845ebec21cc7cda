#!/usr/bin/env python3
"""
Demo Tournament Seeder

Writes a demo tournament with published knockout results into the data
directory so the bracket pages have something to show. Rounds use the
legacy localized labels, including a 3rd-place playoff.

Usage:
    python scripts/seed_demo.py
    python scripts/seed_demo.py --data-dir /path/to/data

Exit codes:
    0: Success (or tournament already present)
    1: Data directory write failure
"""
import argparse
import os
import sys
from datetime import date, timedelta

import yaml

DEMO_TOURNAMENT_ID = 'demo-open'

DEMO_PLAYERS = {
    'p1': 'Бат-Эрдэнэ',
    'p2': 'Тэмүүлэн',
    'p3': 'Анужин',
    'p4': 'Номин',
    'p5': 'Ганбаатар',
    'p6': 'Сарнай',
    'p7': 'Мөнхбат',
    'p8': 'Оюунчимэг',
}


def _player(player_id):
    return {'id': player_id, 'name': DEMO_PLAYERS[player_id]}


def build_demo_tournament(today=None):
    """Registry entry for the demo tournament, running today and tomorrow."""
    today = today or date.today()
    return {
        'id': DEMO_TOURNAMENT_ID,
        'name': 'Demo Open',
        'location': 'Улаанбаатар',
        'start_date': today.isoformat(),
        'end_date': (today + timedelta(days=1)).isoformat(),
        'timezone': 'Asia/Ulaanbaatar',
    }


def build_demo_results():
    """Knockout results for eight players, final still to be played."""
    matches = [
        {'id': 'qf1', 'round': 'Дөрөвний финал', 'player1': _player('p1'), 'player2': _player('p8'),
         'score': '3-0', 'winner': _player('p1')},
        {'id': 'qf2', 'round': 'Дөрөвний финал', 'player1': _player('p4'), 'player2': _player('p5'),
         'score': '2-3', 'winner': _player('p5')},
        {'id': 'qf3', 'round': 'Дөрөвний финал', 'player1': _player('p2'), 'player2': _player('p7'),
         'score': '3-1', 'winner': _player('p2')},
        {'id': 'qf4', 'round': 'Дөрөвний финал', 'player1': _player('p3'), 'player2': _player('p6'),
         'score': '3-2', 'winner': _player('p3')},
        {'id': 'sf1', 'round': 'Хагас финал', 'player1': _player('p1'), 'player2': _player('p5'),
         'score': '3-1', 'winner': _player('p1')},
        {'id': 'sf2', 'round': 'Хагас финал', 'player1': _player('p2'), 'player2': _player('p3'),
         'score': '1-3', 'winner': _player('p3')},
        {'id': 'final', 'round': 'Финал', 'player1': _player('p1'), 'player2': _player('p3')},
        {'id': 'third_place_playoff', 'round': '3-р байрын тоглолт',
         'player1': _player('p5'), 'player2': _player('p2')},
    ]
    return {'is_published': True, 'knockout_results': matches}


def seed(data_dir):
    """Write the demo tournament. Returns False if it already existed."""
    registry_file = os.path.join(data_dir, 'tournaments.yaml')
    tournaments = []
    if os.path.exists(registry_file):
        with open(registry_file, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
        tournaments = data.get('tournaments', [])
    if any(t.get('id') == DEMO_TOURNAMENT_ID for t in tournaments):
        return False

    tournaments.append(build_demo_tournament())
    os.makedirs(data_dir, exist_ok=True)
    with open(registry_file, 'w', encoding='utf-8') as f:
        yaml.dump({'tournaments': tournaments}, f, default_flow_style=False, allow_unicode=True)

    results_dir = os.path.join(data_dir, 'tournaments', DEMO_TOURNAMENT_ID)
    os.makedirs(results_dir, exist_ok=True)
    with open(os.path.join(results_dir, 'results.yaml'), 'w', encoding='utf-8') as f:
        yaml.dump(build_demo_results(), f, default_flow_style=False, allow_unicode=True)
    return True


def main(argv=None):
    default_dir = os.environ.get(
        'BRACKET_DATA_DIR',
        os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'data')
    )
    parser = argparse.ArgumentParser(description='Seed a demo tournament with knockout results.')
    parser.add_argument('--data-dir', default=default_dir, help='Data directory (default: %(default)s)')
    args = parser.parse_args(argv)

    try:
        created = seed(args.data_dir)
    except OSError as e:
        print(f"Error: Failed to write demo data: {e}", file=sys.stderr)
        return 1

    if created:
        print(f"Demo tournament created: /tournament/{DEMO_TOURNAMENT_ID}/results")
    else:
        print(f"Demo tournament '{DEMO_TOURNAMENT_ID}' already exists, nothing to do.")
    return 0


if __name__ == '__main__':
    sys.exit(main())
