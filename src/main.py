# Command line viewer for knockout results

import argparse
import sys
import yaml
from knockout.bracket import BracketPresenter
from knockout.models import MatchRecord


def load_matches(file_path):
    """Load matches from a results file (a match list or a results.yaml mapping)."""
    with open(file_path, mode='r', encoding='utf-8') as file:
        data = yaml.safe_load(file) or {}
    if isinstance(data, dict):
        data = data.get('knockout_results') or []
    return [MatchRecord.from_dict(entry) for entry in data if isinstance(entry, dict)]


def format_bracket(bracket):
    lines = []
    if bracket['is_empty']:
        lines.append(bracket['empty_message'])
        return lines
    for stage in bracket['stages']:
        if lines:
            lines.append('')  # Blank line between stages
        lines.append(f"# {stage['label']}")
        for match in stage['matches']:
            slot1, slot2 = match['slots']
            line = f"[{match['badge']}] {slot1['name']} {slot1['score']} vs {slot2['score']} {slot2['name']}"
            if match['winner_line']:
                line += f"  ({match['winner_line']})"
            lines.append(line)
    return lines


def main(argv=None):
    parser = argparse.ArgumentParser(description='Print a knockout bracket from a results YAML file.')
    parser.add_argument('results_file', help='Path to results.yaml or a YAML list of matches')
    parser.add_argument('--lang', default='mn', choices=['mn', 'en'], help='Label language')
    args = parser.parse_args(argv)

    try:
        matches = load_matches(args.results_file)
    except (OSError, yaml.YAMLError) as e:
        print(f"Error: cannot read {args.results_file}: {e}", file=sys.stderr)
        return 1

    bracket = BracketPresenter(matches, language=args.lang).display()
    for line in format_bracket(bracket):
        print(line)
    return 0


if __name__ == '__main__':
    sys.exit(main())
