from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List
from xml.sax.saxutils import quoteattr

from .outcome import Verdict, merge_tallies

"""JUnit XML and JSON summaries for a batch of document verdicts."""


def ensure_dir(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def summary_dict(verdicts: List[Verdict]) -> Dict[str, Any]:
    total = merge_tallies(verdicts)
    return {
        "documents": len(verdicts),
        "failed": sum(1 for v in verdicts if not v.passed),
        "missing": sum(1 for v in verdicts if v.missing),
        "totals": total.as_dict(),
        "results": [v.as_dict() for v in verdicts],
    }


def write_json(verdicts: List[Verdict], out_path: Path) -> None:
    ensure_dir(out_path)
    out_path.write_text(json.dumps(summary_dict(verdicts), indent=2), encoding="utf-8")


def write_junit(verdicts: List[Verdict], out_path: Path) -> None:
    ensure_dir(out_path)
    total = len(verdicts)
    failures = sum(1 for v in verdicts if not v.passed)
    skipped = sum(1 for v in verdicts if v.missing and v.passed)
    with out_path.open("w", encoding="utf-8") as f:
        f.write('<?xml version="1.0" encoding="UTF-8"?>\n')
        f.write(f'<testsuite name="signature-vectors" tests="{total}" failures="{failures}" skipped="{skipped}">\n')
        for v in verdicts:
            t = v.tally
            f.write(f'  <testcase classname={quoteattr(v.mode)} name={quoteattr(v.source)}>')
            if not v.passed:
                f.write(f'<failure message={quoteattr("; ".join(v.failures))}/>')
            elif v.missing:
                f.write('<skipped message="vector file not found"/>')
            out = f"executed={t.executed} errors={t.errors} skipped_keys={t.skipped_keys}"
            if t.skipped_group_reasons:
                out += " skipped: " + ", ".join(sorted(t.skipped_group_reasons))
            f.write(f"<system-out>{_escape(out)}</system-out>")
            f.write('</testcase>\n')
        f.write('</testsuite>\n')


def _escape(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
