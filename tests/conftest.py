"""Shared fixtures for buildsweep tests."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest


@pytest.fixture
def sample_project(tmp_path):
    """Create a small userscript project tree."""
    lib = tmp_path / "lib"
    (lib / "nested").mkdir(parents=True)

    (lib / "a.js").write_text('console.log("debug");\nexport const a = 1; // a\n')
    (lib / "nested" / "b.ts").write_text("const b: number = 2;\nconsole.warn(b);\n")
    (lib / "broken.js").write_text("function (\n")
    (tmp_path / "main.js").write_text('console.log("entry"); // keep\n')

    # Never discovered
    (tmp_path / "node_modules" / "pkg").mkdir(parents=True)
    (tmp_path / "node_modules" / "pkg" / "index.js").write_text('console.log("dep");\n')
    (tmp_path / "dist").mkdir()
    (tmp_path / "dist" / "bundle.js").write_text('console.log("bundle");\n')
    (tmp_path / "build").mkdir()
    (tmp_path / "build" / "out.js").write_text('console.log("out");\n')
    (tmp_path / ".cache").mkdir()
    (tmp_path / ".cache" / "x.js").write_text('console.log("cache");\n')
    (tmp_path / "README.md").write_text("# readme\n")

    return tmp_path
