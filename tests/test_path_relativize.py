from __future__ import annotations

import os
from pathlib import Path

import pytest

from tasklane.shared.services.log_normalize import make_path_relative


def test_relative_paths_pass_through() -> None:
    assert make_path_relative("src/main.rs", "/tmp/work") == "src/main.rs"
    assert make_path_relative("../other/file.txt", "/tmp/work") == "../other/file.txt"


def test_absolute_path_under_working_directory() -> None:
    assert make_path_relative("/tmp/work/src/main.rs", "/tmp/work") == "src/main.rs"


def test_working_directory_itself_becomes_empty() -> None:
    assert make_path_relative("/tmp/work", "/tmp/work") == ""


def test_nonexistent_path_outside_is_returned_unchanged() -> None:
    path = "/definitely/not/here/file.txt"
    assert make_path_relative(path, "/tmp/work") == path


def test_prefix_match_respects_component_boundaries() -> None:
    assert make_path_relative("/tmp/worker/a.py", "/tmp/work") == "/tmp/worker/a.py"


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
def test_symlinked_working_directory(tmp_path: Path) -> None:
    real = tmp_path / "real"
    (real / "src").mkdir(parents=True)
    target = real / "src" / "app.py"
    target.write_text("print('hi')\n", encoding="utf-8")
    link = tmp_path / "link"
    link.symlink_to(real, target_is_directory=True)

    assert make_path_relative(str(target), str(link)) == os.path.join("src", "app.py")
    assert make_path_relative(str(link / "src" / "app.py"), str(real)) == os.path.join(
        "src", "app.py"
    )


def test_existing_file_outside_working_directory(tmp_path: Path) -> None:
    workspace = tmp_path / "ws"
    workspace.mkdir()
    outside = tmp_path / "notes.txt"
    outside.write_text("x", encoding="utf-8")

    assert make_path_relative(str(outside), str(workspace)) == str(outside)
