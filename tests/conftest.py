"""
Shared pytest fixtures for knockout results tests.

Running tests:
    pytest tests/
"""
import pytest
import sys
import os
import yaml
from filelock import FileLock

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from knockout.models import Player

ADMIN_KEY = 'test-admin-key'


@pytest.fixture
def client():
    """Create a test client."""
    from app import app
    app.config['TESTING'] = True
    with app.test_client() as client:
        yield client


@pytest.fixture
def admin_headers(monkeypatch):
    """Authorization headers accepted by admin endpoints."""
    monkeypatch.setenv('ADMIN_API_KEY', ADMIN_KEY)
    return {'Authorization': f'Bearer {ADMIN_KEY}'}


@pytest.fixture
def temp_data_dir(tmp_path, monkeypatch):
    """Point the app at a temporary data directory holding one tournament."""
    import app as app_module

    tournaments_file = tmp_path / "tournaments.yaml"
    tournaments_dir = tmp_path / "tournaments"
    (tournaments_dir / "spring-open").mkdir(parents=True)

    tournaments_file.write_text(yaml.dump({'tournaments': [
        {
            'id': 'spring-open',
            'name': 'Spring Open',
            'location': 'Улаанбаатар',
            'start_date': '2030-04-01',
            'end_date': '2030-04-02',
        }
    ]}, default_flow_style=False, allow_unicode=True), encoding='utf-8')

    monkeypatch.setattr(app_module, 'DATA_DIR', str(tmp_path))
    monkeypatch.setattr(app_module, 'TOURNAMENTS_FILE', str(tournaments_file))
    monkeypatch.setattr(app_module, 'TOURNAMENTS_DIR', str(tournaments_dir))
    monkeypatch.setattr(app_module, '_data_lock', FileLock(str(tmp_path / '.lock'), timeout=10))
    monkeypatch.setattr(app_module, 'LANGUAGE', 'mn')

    return tmp_path


@pytest.fixture
def write_results(temp_data_dir):
    """Write results.yaml for the test tournament."""
    def _write(matches, is_published=True, tournament_id='spring-open'):
        results_dir = temp_data_dir / "tournaments" / tournament_id
        results_dir.mkdir(parents=True, exist_ok=True)
        results_file = results_dir / "results.yaml"
        results_file.write_text(yaml.dump({
            'is_published': is_published,
            'knockout_results': matches,
        }, default_flow_style=False, allow_unicode=True), encoding='utf-8')
        return results_file
    return _write


@pytest.fixture
def bat():
    return Player(id='p1', name='Bat')


@pytest.fixture
def dorj():
    return Player(id='p2', name='Dorj')


@pytest.fixture
def legacy_matches():
    """Eight-player knockout stored with legacy round labels, final undecided."""
    return [
        {'id': 'sf1', 'round': 'Хагас финал',
         'player1': {'id': 'p1', 'name': 'Bat'}, 'player2': {'id': 'p3', 'name': 'Saraa'},
         'score': '3-1', 'winner': {'id': 'p1', 'name': 'Bat'}},
        {'id': 'qf1', 'round': 'Дөрөвний финал',
         'player1': {'id': 'p1', 'name': 'Bat'}, 'player2': {'id': 'p8', 'name': 'Tuya'},
         'score': '3-0', 'winner': {'id': 'p1', 'name': 'Bat'}},
        {'id': 'third_place_playoff', 'round': '3-р байрын тоглолт',
         'player1': {'id': 'p3', 'name': 'Saraa'}, 'player2': {'id': 'p4', 'name': 'Nomin'}},
        {'id': 'final', 'round': 'Финал',
         'player1': {'id': 'p1', 'name': 'Bat'}, 'player2': {'id': 'p2', 'name': 'Dorj'}},
        {'id': 'sf2', 'round': 'Хагас финал',
         'player1': {'id': 'p2', 'name': 'Dorj'}, 'player2': {'id': 'p4', 'name': 'Nomin'},
         'player1Score': '3', 'player2Score': '2', 'winner': {'id': 'p2', 'name': 'Dorj'}},
    ]
