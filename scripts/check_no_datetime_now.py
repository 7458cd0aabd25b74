#!/usr/bin/env python3
"""Pre-commit hook rejecting direct wall-clock reads in the reunite package.

Case timestamps (created_at, updated_at, decision and ruling times, chat
sent_at) must come from an injected TimeAuthorityProtocol so tests can
freeze and advance time. This script scans reunite/ for datetime.now(),
datetime.utcnow() and datetime.today() calls outside SystemTimeAuthority.

Usage:
    python scripts/check_no_datetime_now.py [package_directory]

Exit codes:
    0: No violations found
    1: Violations found
"""

import re
import sys
from pathlib import Path

DATETIME_NOW_PATTERN = re.compile(r"datetime\s*\.\s*(now|utcnow|today)\s*\(")

# Relative to the package directory
ALLOWED_FILES = {
    "application/services/time_authority_service.py",
}


def check_file(file_path: Path) -> list[tuple[int, str]]:
    """Return (line_number, line) for each direct clock read in a file."""
    try:
        content = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return []

    violations: list[tuple[int, str]] = []
    for line_num, line in enumerate(content.splitlines(), start=1):
        if line.lstrip().startswith("#"):
            continue
        if DATETIME_NOW_PATTERN.search(line):
            violations.append((line_num, line.strip()))
    return violations


def find_violations(package_dir: Path) -> dict[str, list[tuple[int, str]]]:
    """Scan a package, skipping ALLOWED_FILES."""
    found: dict[str, list[tuple[int, str]]] = {}
    for py_file in sorted(package_dir.rglob("*.py")):
        relative = py_file.relative_to(package_dir).as_posix()
        if relative in ALLOWED_FILES:
            continue
        violations = check_file(py_file)
        if violations:
            found[relative] = violations
    return found


def main() -> int:
    package_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("reunite")
    if not package_dir.exists():
        print(f"Warning: {package_dir}/ not found, skipping check")
        return 0

    found = find_violations(package_dir)
    if not found:
        print(f"No direct clock reads found in {package_dir}/")
        return 0

    print("Direct datetime.now() calls detected:")
    print()
    for path, violations in found.items():
        print(f"  {path}:")
        for line_num, line_content in violations:
            print(f"    Line {line_num}: {line_content}")
    print()
    print("Inject TimeAuthorityProtocol and call self._time.now() instead.")
    return 1


if __name__ == "__main__":
    sys.exit(main())
