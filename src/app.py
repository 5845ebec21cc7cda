"""
Flask web application for Knockout Results.
"""
import os
import hmac
import re
import yaml
from datetime import datetime
from functools import wraps
from filelock import FileLock
from flask import Flask, render_template, request, jsonify, redirect, url_for, abort
from knockout.models import MatchRecord
from knockout.bracket import BracketPresenter
from knockout.rankings import get_final_rankings
from knockout.events import get_countdown

app = Flask(__name__)


def _get_or_create_secret_key() -> bytes:
    """Get SECRET_KEY from env, or generate and persist to file."""
    env_key = os.environ.get('SECRET_KEY')
    if env_key:
        return env_key.encode() if isinstance(env_key, str) else env_key
    key_file = os.path.join(DATA_DIR, '.secret_key')
    if os.path.exists(key_file):
        with open(key_file, 'rb') as f:
            return f.read()
    key = os.urandom(24)
    os.makedirs(os.path.dirname(key_file), exist_ok=True)
    with open(key_file, 'wb') as f:
        f.write(key)
    return key


BASE_DIR = os.path.dirname(os.path.dirname(__file__))
DATA_DIR = os.environ.get('BRACKET_DATA_DIR', os.path.join(BASE_DIR, 'data'))
LANGUAGE = os.environ.get('BRACKET_LANGUAGE', 'mn')

app.secret_key = _get_or_create_secret_key()

TOURNAMENTS_FILE = os.path.join(DATA_DIR, 'tournaments.yaml')
TOURNAMENTS_DIR = os.path.join(DATA_DIR, 'tournaments')
os.makedirs(DATA_DIR, exist_ok=True)
_data_lock = FileLock(os.path.join(DATA_DIR, '.lock'), timeout=10)

_TOURNAMENT_ID_RE = re.compile(r'^[A-Za-z0-9][A-Za-z0-9_-]*$')

STATUS_LABELS = {
    'mn': {'upcoming': 'Удахгүй', 'ongoing': 'Идэвхтэй', 'past': 'Дууссан'},
    'en': {'upcoming': 'Upcoming', 'ongoing': 'Ongoing', 'past': 'Finished'},
}

UNPUBLISHED_MESSAGES = {
    'mn': 'Тэмцээний үр дүн хараахан нийтлэгдээгүй байна',
    'en': 'Results have not been published yet',
}


def require_admin_key(f):
    """Require valid ADMIN_API_KEY in Authorization header."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        expected_key = os.environ.get('ADMIN_API_KEY')
        if not expected_key:
            return jsonify({'success': False, 'error': 'Server not configured for admin operations'}), 500

        auth_header = request.headers.get('Authorization', '')
        if not auth_header.startswith('Bearer '):
            return jsonify({'success': False, 'error': 'Missing or invalid Authorization header'}), 401

        provided_key = auth_header[7:]  # Strip "Bearer "
        if not hmac.compare_digest(expected_key, provided_key):
            return jsonify({'success': False, 'error': 'Invalid API key'}), 401

        return f(*args, **kwargs)
    return decorated_function


def load_tournaments() -> list:
    """Load the tournament registry from YAML."""
    if not os.path.exists(TOURNAMENTS_FILE):
        return []
    try:
        with open(TOURNAMENTS_FILE, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
        return data.get('tournaments', []) if data else []
    except Exception as e:
        app.logger.warning(f'Failed to parse {TOURNAMENTS_FILE}: {e}')
        return []


def get_tournament(tournament_id: str):
    """Find a tournament in the registry by id. Returns None if unknown."""
    if not tournament_id or not _TOURNAMENT_ID_RE.match(tournament_id):
        return None
    return next((t for t in load_tournaments() if str(t.get('id')) == tournament_id), None)


def _results_file(tournament_id: str) -> str:
    return os.path.join(TOURNAMENTS_DIR, tournament_id, 'results.yaml')


def load_results(tournament_id: str) -> dict:
    """Load a tournament's knockout results from YAML."""
    empty = {'is_published': False, 'knockout_results': []}
    path = _results_file(tournament_id)
    if not os.path.exists(path):
        return empty
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except Exception as e:
        app.logger.warning(f'Failed to parse {path}: {e}')
        return empty
    if not data:
        return empty
    if not isinstance(data.get('knockout_results'), list):
        data['knockout_results'] = []
    data['is_published'] = bool(data.get('is_published', False))
    return data


def save_results(tournament_id: str, results: dict):
    """Save a tournament's knockout results to YAML."""
    path = _results_file(tournament_id)
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        yaml.dump(results, f, default_flow_style=False, allow_unicode=True)


def load_matches(tournament_id: str) -> list:
    """Load knockout matches as MatchRecord objects, skipping malformed entries."""
    matches = []
    for entry in load_results(tournament_id)['knockout_results']:
        if isinstance(entry, dict):
            matches.append(MatchRecord.from_dict(entry))
        else:
            app.logger.warning(f'Skipping malformed match entry in {tournament_id}: {entry!r}')
    return matches


def record_winner(tournament_id: str, match_id: str, player_id: str) -> bool:
    """Store the winner of a match. Returns False if the match or player is unknown."""
    with _data_lock:
        results = load_results(tournament_id)
        entries = results['knockout_results']
        for i, entry in enumerate(entries):
            if not isinstance(entry, dict) or str(entry.get('id', '')) != match_id:
                continue
            match = MatchRecord.from_dict(entry)
            winner = match.player_by_id(player_id)
            if winner is None:
                return False
            entries[i] = match.with_winner(winner).to_dict()
            break
        else:
            return False
        results['updated'] = datetime.now().isoformat()
        save_results(tournament_id, results)
    app.logger.info(f'Recorded winner {player_id} for match {match_id} in {tournament_id}')
    return True


def tournament_summary(tournament: dict) -> dict:
    """Add status and countdown to a registry entry for display."""
    summary = dict(tournament)
    start = tournament.get('start_date')
    if not start:
        summary['status'] = None
        summary['countdown'] = None
        return summary
    try:
        countdown = get_countdown(start, tournament.get('end_date'),
                                  timezone=tournament.get('timezone'))
    except (ValueError, KeyError) as e:
        app.logger.warning(f"Invalid dates for tournament {tournament.get('id')}: {e}")
        summary['status'] = None
        summary['countdown'] = None
        return summary
    summary['status'] = countdown['status']
    summary['status_label'] = STATUS_LABELS.get(LANGUAGE, STATUS_LABELS['mn'])[countdown['status']]
    summary['countdown'] = countdown
    return summary


@app.route('/')
def index():
    return redirect(url_for('tournaments'))


@app.route('/tournaments')
def tournaments():
    """List tournaments with their status."""
    items = [tournament_summary(t) for t in load_tournaments()]
    return render_template('tournaments.html', tournaments=items)


@app.route('/tournament/<tournament_id>')
def tournament_detail(tournament_id):
    """Tournament details with countdown."""
    tournament = get_tournament(tournament_id)
    if not tournament:
        abort(404)
    results = load_results(tournament_id)
    return render_template('tournament.html', tournament=tournament_summary(tournament),
                           is_published=results['is_published'])


@app.route('/tournament/<tournament_id>/results')
def tournament_results(tournament_id):
    """Read-only bracket page."""
    tournament = get_tournament(tournament_id)
    if not tournament:
        abort(404)
    results = load_results(tournament_id)
    if not results['is_published']:
        return render_template('results.html', tournament=tournament, published=False,
                               bracket=None, rankings=[],
                               unpublished_message=UNPUBLISHED_MESSAGES.get(LANGUAGE, UNPUBLISHED_MESSAGES['mn']))
    matches = load_matches(tournament_id)
    bracket = BracketPresenter(matches, language=LANGUAGE).display()
    return render_template('results.html', tournament=tournament, published=True,
                           bracket=bracket, rankings=get_final_rankings(matches))


@app.route('/api/tournaments/<tournament_id>/bracket')
def api_bracket(tournament_id):
    """Bracket display data as JSON."""
    if not get_tournament(tournament_id):
        return jsonify({'success': False, 'error': 'Tournament not found'}), 404
    if not load_results(tournament_id)['is_published']:
        return jsonify({'success': False, 'error': 'Results not published'}), 403
    bracket = BracketPresenter(load_matches(tournament_id), language=LANGUAGE).display()
    return jsonify({'success': True, 'bracket': bracket})


@app.route('/api/tournaments/<tournament_id>/rankings')
def api_rankings(tournament_id):
    """Final podium as JSON."""
    if not get_tournament(tournament_id):
        return jsonify({'success': False, 'error': 'Tournament not found'}), 404
    if not load_results(tournament_id)['is_published']:
        return jsonify({'success': False, 'error': 'Results not published'}), 403
    return jsonify({'success': True, 'rankings': get_final_rankings(load_matches(tournament_id))})


@app.route('/api/tournaments/<tournament_id>/matches/<match_id>/winner', methods=['POST'])
@require_admin_key
def api_set_winner(tournament_id, match_id):
    """Admin endpoint confirming the winner of a knockout match.

    Requires: player_id in JSON body.
    """
    if not get_tournament(tournament_id):
        return jsonify({'success': False, 'error': 'Tournament not found'}), 404

    data = request.get_json(silent=True)
    if not data:
        return jsonify({'success': False, 'error': 'No data provided'}), 400
    if not isinstance(data, dict):
        return jsonify({'success': False, 'error': 'Request body must be a JSON object'}), 400
    player_id = str(data.get('player_id', '')).strip()
    if not player_id:
        return jsonify({'success': False, 'error': 'Missing required fields'}), 400

    recorded = []
    presenter = BracketPresenter(
        load_matches(tournament_id),
        on_player_select=lambda pid: recorded.append(record_winner(tournament_id, match_id, pid)),
        language=LANGUAGE,
    )
    if presenter.find_match(match_id) is None:
        return jsonify({'success': False, 'error': 'Match not found'}), 404
    if not presenter.select_player(match_id, player_id):
        return jsonify({'success': False, 'error': 'Player is not in this match'}), 400
    if not all(recorded):
        # Results changed after they were read
        return jsonify({'success': False, 'error': 'Match changed, reload and try again'}), 409

    return jsonify({'success': True})


@app.route('/api/tournaments/<tournament_id>/publish', methods=['POST'])
@require_admin_key
def api_publish(tournament_id):
    """Admin endpoint to publish or hide a tournament's results."""
    if not get_tournament(tournament_id):
        return jsonify({'success': False, 'error': 'Tournament not found'}), 404

    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({'success': False, 'error': 'Request body must be a JSON object'}), 400
    published = data.get('published', True)
    if not isinstance(published, bool):
        return jsonify({'success': False, 'error': 'published must be a boolean'}), 400

    with _data_lock:
        results = load_results(tournament_id)
        results['is_published'] = published
        save_results(tournament_id, results)

    return jsonify({'success': True, 'published': published})


if __name__ == '__main__':
    app.run(debug=True, port=5000)
