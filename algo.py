"""Entry point for the min-conflicts N-Queens solver.

Examples
--------
    python algo.py --size 16 --seed 7
    python algo.py --mode experiments --strategy most/row,random/row
    python algo.py --quick-test
"""

from minconflicts.analysis.cli import main


if __name__ == "__main__":
    main()
