import ast
from pathlib import Path


def _imports(package_dir: Path, repo_root: Path, forbidden: str):
    violations = []
    for py_file in package_dir.rglob("*.py"):
        source = py_file.read_text(encoding="utf-8")
        tree = ast.parse(source, filename=str(py_file))
        rel_path = py_file.relative_to(repo_root)

        for node in ast.walk(tree):
            if isinstance(node, ast.Import):
                for alias in node.names:
                    name = alias.name
                    if name == forbidden or name.startswith(forbidden + "."):
                        violations.append(f"{rel_path}:{node.lineno} imports {name}")
            elif isinstance(node, ast.ImportFrom):
                module = node.module or ""
                if module == forbidden or module.startswith(forbidden + "."):
                    violations.append(f"{rel_path}:{node.lineno} imports from {module}")
    return violations


def test_pipeline_layer_does_not_import_ui_layer():
    """Pipeline layer must not import from UI layer directly."""
    repo_root = Path(__file__).resolve().parents[2]
    violations = _imports(repo_root / "fbc" / "pipeline", repo_root, "fbc.ui")
    assert not violations, "Pipeline layer must not import UI layer:\n" + "\n".join(violations)


def test_domain_layer_is_standalone():
    """Domain models must not depend on infrastructure."""
    repo_root = Path(__file__).resolve().parents[2]
    violations = _imports(repo_root / "fbc" / "domain", repo_root, "fbc.infrastructure")
    assert not violations, "Domain layer must not import infrastructure:\n" + "\n".join(violations)
