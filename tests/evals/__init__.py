"""
EVALs suite for robustdea: degenerate and pathological problems.

Philosophy:
    These tests target the corners where sampling and optimization tend to
    break: single DMUs, exact ties, flat or empty weight regions, solver
    failures and ordinal scales that do not fit.

Run tests:
    pytest tests/evals/ -v                    # Run all evals
    pytest tests/ --ignore=tests/evals/      # Run regular tests only
"""
