#!/usr/bin/env python3
"""
Utility script to run NEAT examples easily.

Usage:
    python scripts/run_example.py xor
    python scripts/run_example.py xor --config examples/configs/config_xor.json --num-jobs 8
"""

import sys
import argparse
import logging
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from evoneat import Config, ConfigError
from examples.trial_XOR import Evolution_XOR


EXAMPLES = {
    'xor': {
        'evolution': Evolution_XOR,
        'config': 'examples/configs/config_xor.ini',
        'description': 'XOR logic problem'
    },
}


def main():
    parser = argparse.ArgumentParser(description='Run NEAT examples')
    parser.add_argument('example', choices=EXAMPLES.keys(),
                        help='Example to run')
    parser.add_argument('--config', default=None,
                        help='Configuration file (.ini or .json); defaults to the example configuration')
    parser.add_argument('--num-jobs', type=int, default=None,
                        help='Number of parallel jobs for fitness evaluation')
    parser.add_argument('--verbose', action='store_true',
                        help='Log speciation and reproduction details')

    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(asctime)s %(name)s %(levelname)s: %(message)s')

    example     = EXAMPLES[args.example]
    config_file = args.config or example['config']
    print(f"Running {example['description']}...")

    try:
        if config_file.endswith('.json'):
            config = Config.from_json(config_file)
        else:
            config = Config(config_file)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(config.summary())
    evolution = example['evolution'](config)
    best = evolution.run(num_jobs=args.num_jobs)
    print(f"\nBest fitness: {best.fitness:.4f}")


if __name__ == '__main__':
    main()
