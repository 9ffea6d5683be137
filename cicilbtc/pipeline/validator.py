"""Log validator: checks the invariants of data/log.json.

Checks:
  1. ``entries`` is a list
  2. Every date is YYYY-MM-DD
  3. Dates are unique and ascending
  4. fng_value within [0, 100]
  5. btc_usd and btc_idr positive
  6. site_start set when entries exist, and not after the first entry

Usage:
    python -m cicilbtc.pipeline.validator data/log.json
"""

import json
import re
import sys
from typing import List, Tuple

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def validate(log_path: str) -> Tuple[bool, List[str]]:
    """Run all validation checks against log_path.

    Args:
        log_path: Absolute or relative path to ``log.json``.

    Returns:
        Tuple of ``(passed: bool, messages: list[str])``.
        ``messages`` contains PASS/FAIL lines for each check.
    """
    messages: List[str] = []
    passed = True

    # ── load ──────────────────────────────────────────────────────────────────
    try:
        with open(log_path, encoding="utf-8") as f:
            doc = json.load(f)
    except FileNotFoundError:
        return False, [f"FAIL  file not found: {log_path}"]
    except (OSError, ValueError) as exc:
        return False, [f"FAIL  could not read JSON: {exc}"]

    if not isinstance(doc, dict):
        return False, ["FAIL  top level is not an object"]

    # ── check 1: entries list ─────────────────────────────────────────────────
    entries = doc.get("entries")
    if not isinstance(entries, list):
        return False, ["FAIL  'entries' is missing or not a list"]
    messages.append(f"PASS  entries is a list ({len(entries)} entries)")

    # ── check 2: date format ──────────────────────────────────────────────────
    dates = [str(e.get("date", "")) if isinstance(e, dict) else "" for e in entries]
    bad_dates = [(i, d) for i, d in enumerate(dates) if not _DATE_RE.match(d)]
    if not bad_dates:
        messages.append("PASS  all dates are YYYY-MM-DD")
    else:
        messages.append(f"FAIL  {len(bad_dates)} malformed date(s): {bad_dates[:3]}")
        passed = False

    # ── check 3: unique + ascending ───────────────────────────────────────────
    dupes = sorted({d for d in dates if dates.count(d) > 1})
    if not dupes:
        messages.append("PASS  dates are unique")
    else:
        messages.append(f"FAIL  duplicate dates: {dupes[:3]}")
        passed = False

    if dates == sorted(dates):
        messages.append("PASS  entries sorted ascending by date")
    else:
        messages.append("FAIL  entries are not sorted by date")
        passed = False

    # ── check 4: fng_value in [0, 100] ────────────────────────────────────────
    bad_fng = []
    for d, e in zip(dates, entries):
        value = e.get("fng_value") if isinstance(e, dict) else None
        if not _is_number(value) or not 0 <= value <= 100:
            bad_fng.append((d, value))
    if not bad_fng:
        messages.append("PASS  fng_value ∈ [0, 100] for all entries")
    else:
        messages.append(f"FAIL  fng_value out of range in {len(bad_fng)} entries: {bad_fng[:3]}")
        passed = False

    # ── check 5: positive prices ──────────────────────────────────────────────
    for col in ("btc_usd", "btc_idr"):
        bad = [
            d for d, e in zip(dates, entries)
            if not (isinstance(e, dict) and _is_number(e.get(col)) and e[col] > 0)
        ]
        if not bad:
            messages.append(f"PASS  {col}: all positive")
        else:
            messages.append(f"FAIL  {col}: {len(bad)} non-positive/missing at {bad[:3]}")
            passed = False

    # ── check 6: site_start ───────────────────────────────────────────────────
    site_start = doc.get("site_start")
    if not entries:
        messages.append("PASS  site_start not required (no entries)")
    elif not site_start:
        messages.append("FAIL  site_start is unset but entries exist")
        passed = False
    elif dates and str(site_start) > min(dates):
        messages.append(f"FAIL  site_start {site_start} is after first entry {min(dates)}")
        passed = False
    else:
        messages.append(f"PASS  site_start = {site_start}")

    return passed, messages


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def main() -> int:
    if len(sys.argv) < 2:
        print("Usage: python -m cicilbtc.pipeline.validator <path_to_log_json>")
        return 1
    log_path = sys.argv[1]
    passed, messages = validate(log_path)
    for msg in messages:
        print(msg)
    if passed:
        print("\nVALIDATION PASSED ✓")
        return 0
    else:
        print("\nVALIDATION FAILED ✗")
        return 1


if __name__ == "__main__":
    sys.exit(main())
