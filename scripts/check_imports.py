#!/usr/bin/env python3
"""Check hexagonal layering of the reunite package.

Layering rules:
- domain/: models, errors and the state machine; imports no other layer
- application/: ports and workflow services; may import domain/ only
- infrastructure/: stores, stubs, logging, metrics; may import domain/ and application/
- api/: FastAPI routes; may import application/ and domain/

config/ and bootstrap/ sit outside the layers: config/ holds plain
settings every layer may read, bootstrap/ is the composition root that
wires infrastructure for the API.

Usage:
    python scripts/check_imports.py [package_directory]

Exit codes:
    0: No violations found
    1: Violations found
"""
import ast
import sys
from pathlib import Path
from typing import NamedTuple

PACKAGE = "reunite"

# Lower number = more inner layer
LAYER_HIERARCHY: dict[str, int] = {
    "domain": 0,
    "application": 1,
    "infrastructure": 2,
    "api": 3,
}

ALLOWED_IMPORTS: dict[str, set[str]] = {
    "domain": set(),
    "application": {"domain"},
    "infrastructure": {"domain", "application"},
    "api": {"application", "domain"},
}


class Violation(NamedTuple):
    path: str
    line: int
    message: str


def get_import_module(node: ast.Import | ast.ImportFrom) -> str | None:
    """Return the imported module name ('import a.b' yields 'a.b')."""
    if isinstance(node, ast.ImportFrom):
        return node.module
    if node.names:
        return node.names[0].name
    return None


def layer_of(py_file: Path, package_dir: Path) -> str | None:
    """Layer a file belongs to, or None for files outside the layers."""
    try:
        parts = py_file.relative_to(package_dir).parts
    except ValueError:
        return None
    if len(parts) < 2:
        return None
    return parts[0] if parts[0] in LAYER_HIERARCHY else None


def target_layer(module: str) -> str | None:
    """Layer an absolute import points at, or None if it is not one of ours."""
    parts = module.split(".")
    if len(parts) < 2 or parts[0] != PACKAGE:
        return None
    return parts[1] if parts[1] in LAYER_HIERARCHY else None


def check_file_imports(py_file: Path, package_dir: Path) -> list[Violation]:
    """Check one file; unparseable files are reported on stderr and skipped."""
    file_layer = layer_of(py_file, package_dir)
    if file_layer is None:
        return []

    try:
        tree = ast.parse(py_file.read_text(encoding="utf-8"), filename=str(py_file))
    except (SyntaxError, UnicodeDecodeError) as e:
        print(f"Warning: Could not parse {py_file}: {e}", file=sys.stderr)
        return []

    allowed = ALLOWED_IMPORTS[file_layer]
    violations: list[Violation] = []
    for node in ast.walk(tree):
        if not isinstance(node, (ast.Import, ast.ImportFrom)):
            continue
        module = get_import_module(node)
        if not module:
            continue
        target = target_layer(module)
        if target is None or target == file_layer or target in allowed:
            continue
        violations.append(
            Violation(
                str(py_file),
                node.lineno,
                f"{file_layer} layer cannot import from {target} ({module})",
            )
        )
    return violations


def check_import_boundaries(package_dir: Path) -> list[Violation]:
    """Check every module under the package directory."""
    if not package_dir.exists():
        print(f"Error: Package directory '{package_dir}' does not exist", file=sys.stderr)
        return []

    violations: list[Violation] = []
    for py_file in sorted(package_dir.rglob("*.py")):
        violations.extend(check_file_imports(py_file, package_dir))
    return violations


def format_violations(violations: list[Violation]) -> str:
    if not violations:
        return ""
    lines = ["Import boundary violations found:", ""]
    lines.extend(f"  {v.path}:{v.line}: {v.message}" for v in sorted(violations))
    lines.append("")
    lines.append(f"Total: {len(violations)} violation(s)")
    return "\n".join(lines)


def main() -> int:
    if len(sys.argv) > 1:
        package_dir = Path(sys.argv[1])
    else:
        package_dir = Path(__file__).parent.parent / PACKAGE

    violations = check_import_boundaries(package_dir)
    if violations:
        print(format_violations(violations))
        return 1
    print("No import boundary violations found.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
