#!/usr/bin/env python3
"""
Generate test coverage report for the Parking Facility Engine.
Requires: pip install -e .[test]
"""

import coverage
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


def generate_coverage_report():
    cov = coverage.Coverage(
        source=['parkinglot'],
        omit=['*/tests/*', '*/__pycache__/*', '*/__main__.py']
    )
    cov.start()

    try:
        from tests.run_tests import run_all_tests
        result = run_all_tests()
    finally:
        cov.stop()
        cov.save()

    print("\n" + "=" * 60)
    print("Test Coverage Report")
    print("=" * 60)
    cov.report(show_missing=True)

    cov.html_report(directory='htmlcov')
    print("HTML report generated in 'htmlcov' directory")
    cov.xml_report(outfile='coverage.xml')
    print("XML report generated as 'coverage.xml'")

    return result.wasSuccessful()


if __name__ == "__main__":
    sys.exit(0 if generate_coverage_report() else 1)
