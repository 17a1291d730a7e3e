from __future__ import annotations

import pytest

from ._gate import require_arch_checks_enabled
from ._utils import ghr_root, iter_python_files, matches_prefix, parse_imports

# Package -> imports it must never make. Lower layers know nothing of the
# ones above them; only the CLI touches typer.
FORBIDDEN: dict[str, tuple[str, ...]] = {
    "core": ("ghr.platform", "ghr.output", "ghr.release", "ghr.github", "ghr.cli", "typer", "rich"),
    "platform": ("ghr.output", "ghr.release", "ghr.github", "ghr.cli", "typer", "rich"),
    "output": ("ghr.release", "ghr.github", "ghr.cli", "typer"),
    "release": ("ghr.github", "ghr.cli", "typer", "rich"),
    "github": ("ghr.output", "ghr.cli", "typer", "rich"),
}


@pytest.mark.parametrize("package", sorted(FORBIDDEN))
def test_package_imports_point_downwards(package: str) -> None:
    require_arch_checks_enabled()

    root = ghr_root()
    forbidden = FORBIDDEN[package]

    offenders: list[str] = []
    for file_path in iter_python_files(root / package):
        rel = file_path.relative_to(root)
        for item in parse_imports(file_path):
            if any(matches_prefix(item.module, prefix) for prefix in forbidden):
                offenders.append(f"{rel}:{item.line}: forbidden import '{item.module}'")

    assert not offenders, f"Layering violations in ghr.{package}:\n" + "\n".join(offenders)
