"""
Shared fixtures for uniqfiles tests.
Creates isolated temporary directories with controlled test files.
"""
import pytest
import tempfile
from pathlib import Path
from typing import Dict


@pytest.fixture
def temp_dir():
    """Creates isolated temporary directory, auto-cleanup after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def scenario_files(temp_dir) -> Dict[str, str]:
    """
    The classic uniq example:
    - f1, f2, f5 contain "a" (one group of 3, f1 first)
    - f3 contains "c" (same size as the "a" files, different content)
    - f4 contains "aa" (unique size, never digested)
    """
    contents = {"f1": b"a", "f2": b"a", "f3": b"c", "f4": b"aa", "f5": b"a"}
    files = {}
    for name, content in contents.items():
        path = temp_dir / name
        path.write_bytes(content)
        files[name] = str(path)
    return files


@pytest.fixture
def scenario_paths(scenario_files):
    """Scenario file paths in input order f1..f5."""
    return [scenario_files[name] for name in ("f1", "f2", "f3", "f4", "f5")]


@pytest.fixture
def tree(temp_dir) -> Dict[str, Path]:
    """
    Directory tree for recursive tests:
    root/a.txt, root/sub/b.txt (same as a.txt), root/sub/deeper/c.txt (unique),
    root/link_to_a (symlink), root/link_to_sub (symlinked directory)
    """
    files = {}
    root = temp_dir / "root"
    deeper = root / "sub" / "deeper"
    deeper.mkdir(parents=True)

    files["a"] = root / "a.txt"
    files["a"].write_bytes(b"same content")
    files["b"] = root / "sub" / "b.txt"
    files["b"].write_bytes(b"same content")
    files["c"] = deeper / "c.txt"
    files["c"].write_bytes(b"unique content here")

    files["link_file"] = root / "link_to_a"
    files["link_file"].symlink_to(files["a"])
    files["link_dir"] = root / "link_to_sub"
    files["link_dir"].symlink_to(root / "sub", target_is_directory=True)

    files["root"] = root
    return files
