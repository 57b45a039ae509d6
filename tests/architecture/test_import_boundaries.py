"""
Import boundaries between the layers.

1. leave_kernel/** may NOT import leave_config.  Configuration reaches the
   kernel only as values built by leave_config.bridges.

2. leave_kernel/domain/** is pure: no sqlalchemy, no yaml, no imports from
   db/, models/, services/, selectors/ or actions.

3. Selectors never import services; services never import actions.

These tests read source code via AST.
"""

import ast
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
KERNEL = ROOT / "leave_kernel"


def _python_files(root: Path) -> list[Path]:
    return sorted(root.rglob("*.py"))


def _extract_imports(path: Path) -> list[tuple[int, str]]:
    """(line_number, module) for every import in ``path``."""
    tree = ast.parse(path.read_text(), filename=str(path))
    results: list[tuple[int, str]] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                results.append((node.lineno, alias.name))
        elif isinstance(node, ast.ImportFrom) and node.module:
            results.append((node.lineno, node.module))
    return results


def _violations(root: Path, forbidden: tuple[str, ...]) -> list[str]:
    found = []
    for path in _python_files(root):
        for lineno, module in _extract_imports(path):
            if any(module == p or module.startswith(p + ".") for p in forbidden):
                found.append(f"{path.relative_to(ROOT)}:{lineno} imports {module}")
    return found


class TestKernelNoUpwardDependencies:
    def test_kernel_does_not_import_config(self):
        assert _violations(KERNEL, ("leave_config",)) == []

    def test_kernel_tree_is_not_empty(self):
        assert len(_python_files(KERNEL)) > 10


class TestDomainPurity:
    FORBIDDEN = (
        "sqlalchemy",
        "yaml",
        "psycopg2",
        "leave_kernel.db",
        "leave_kernel.models",
        "leave_kernel.services",
        "leave_kernel.selectors",
        "leave_kernel.actions",
        "leave_config",
    )

    def test_domain_has_no_infrastructure_imports(self):
        assert _violations(KERNEL / "domain", self.FORBIDDEN) == []


class TestLayerDirection:
    def test_selectors_do_not_import_services(self):
        forbidden = ("leave_kernel.services", "leave_kernel.actions")
        assert _violations(KERNEL / "selectors", forbidden) == []

    def test_services_do_not_import_actions(self):
        assert _violations(KERNEL / "services", ("leave_kernel.actions",)) == []

    def test_models_do_not_import_services(self):
        forbidden = ("leave_kernel.services", "leave_kernel.selectors", "leave_kernel.actions")
        assert _violations(KERNEL / "models", forbidden) == []
