# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Shared pytest fixtures for relpack tests.

Fixtures here are available to every test file automatically.
Only fixtures used by more than one test module live here.
"""

import textwrap
from pathlib import Path

import pytest


@pytest.fixture()
def source_tree(tmp_path: Path) -> Path:
    """
    A source root with two asset directories and one loose file.

        src/files/
        ├─ templates/base.html
        ├─ tools/README.txt
        ├─ tools/bin/run.sh
        ├─ tools/empty/
        └─ notes.txt          (not an asset)
    """
    root = tmp_path / "src" / "files"
    (root / "tools" / "bin").mkdir(parents=True)
    (root / "tools" / "empty").mkdir()
    (root / "tools" / "bin" / "run.sh").write_text("#!/bin/sh\necho run\n", encoding="utf-8")
    (root / "tools" / "README.txt").write_text("tools " * 200, encoding="utf-8")
    (root / "templates").mkdir()
    (root / "templates" / "base.html").write_text("<html></html>\n", encoding="utf-8")
    (root / "notes.txt").write_text("loose files are ignored", encoding="utf-8")
    return root


@pytest.fixture()
def tmp_config_file(tmp_path: Path, source_tree: Path) -> Path:
    """
    A relpack.yaml next to the source tree, pinned to version 1.2.3 and an
    explicit repository so no test ever needs a real git remote.
    """
    config_content = textwrap.dedent("""\
        project:
          config_version: "1.0.0"
          version: "1.2.3"
          log_level: "DEBUG"
        build:
          source_directory: src/files
          output_directory: dist
        publish:
          repository: acme/widgets
    """)
    config_file = tmp_path / "relpack.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def invalid_config_file(tmp_path: Path) -> Path:
    """A file that's valid YAML but fails schema validation (unknown key)."""
    config_content = textwrap.dedent("""\
        project:
          version: "1.0.0"
          colour: blue
    """)
    config_file = tmp_path / "invalid.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def broken_yaml_file(tmp_path: Path) -> Path:
    """A file that isn't valid YAML at all."""
    config_file = tmp_path / "broken.yaml"
    config_file.write_text("{{not: yaml: at: all:::", encoding="utf-8")
    return config_file
