"""Render run reports and derive the process exit status."""

import logging
from collections.abc import Sequence
from typing import Any

from branch_protection_probe.models.result import RunReport

VERDICT_SYMBOLS = {
    "PASS": "✓",
    "FAIL": "✗",
    "INCONCLUSIVE": "?",
}


def format_summary(report: RunReport) -> Sequence[str]:
    """Format one line per pair in run order, followed by the totals."""
    lines = [f"{record.pair}: {record.verdict}" for record in report.records]
    lines.extend(
        [
            "",
            f"Total:        {report.total}",
            f"Passed:       {report.passed}",
            f"Failed:       {report.failed}",
            f"Inconclusive: {report.inconclusive}",
        ]
    )
    return lines


def log_results_summary(log: logging.Logger, report: RunReport) -> None:
    """Log a formatted summary of the verdicts with their notes."""
    log.info("=" * 80)
    log.info("Branch Protection Summary:")
    log.info("=" * 80)

    for record in report.records:
        symbol = VERDICT_SYMBOLS.get(record.verdict, "?")
        log.info("%s %s: %s", symbol, record.pair, record.verdict)
        if record.note:
            log.info("  Note: %s", record.note)

    if report.failed:
        log.error(
            "%d protection gap(s) found, review branch protection rules",
            report.failed,
        )
    elif report.inconclusive:
        log.warning(
            "%d check(s) could not be performed, verify them manually",
            report.inconclusive,
        )
    else:
        log.info("Branch protection is working correctly")


def format_output(report: RunReport) -> dict[str, Any]:
    """Format the report for JSON output."""
    return {
        "total": report.total,
        "passed": report.passed,
        "failed": report.failed,
        "inconclusive": report.inconclusive,
        "results": [
            {
                "target": record.target.name,
                "label": record.target.display,
                "probe": record.kind,
                "verdict": record.verdict,
                "note": record.note,
            }
            for record in report.records
        ],
    }


def exit_status(report: RunReport) -> int:
    """Return 1 if any protection gap was found, 0 otherwise."""
    return 1 if report.failed else 0
