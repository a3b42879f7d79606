from pathlib import Path

import pytest

from pagesmith.errors import FilesystemError
from pagesmith.walker import list_files, suffix_filter


def _write(path: Path, body: str = "") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(body, encoding="utf-8")


def test_lists_matching_files_in_nested_directories(tmp_path: Path) -> None:
    _write(tmp_path / "index.md")
    _write(tmp_path / "posts" / "first.MD")
    _write(tmp_path / "posts" / "deep" / "second.html")
    _write(tmp_path / "posts" / "notes.txt")
    (tmp_path / "empty").mkdir()

    files = list_files(tmp_path, suffix_filter(".md", "html"))

    relative = sorted(path.relative_to(tmp_path.resolve()).as_posix() for path in files)
    assert relative == ["index.md", "posts/deep/second.html", "posts/first.MD"]
    assert all(path.is_absolute() for path in files)


def test_predicate_sees_file_name_only(tmp_path: Path) -> None:
    _write(tmp_path / "keep-me.md")
    _write(tmp_path / "drop.md")

    files = list_files(tmp_path, lambda name: name.startswith("keep"))

    assert [path.name for path in files] == ["keep-me.md"]


def test_missing_root_raises_filesystem_error(tmp_path: Path) -> None:
    with pytest.raises(FilesystemError) as excinfo:
        list_files(tmp_path / "missing", suffix_filter(".md"))

    assert excinfo.value.path == str(tmp_path / "missing")


def test_file_root_raises_filesystem_error(tmp_path: Path) -> None:
    _write(tmp_path / "file.md")

    with pytest.raises(FilesystemError):
        list_files(tmp_path / "file.md", suffix_filter(".md"))


def test_symlinked_directories_are_not_followed(tmp_path: Path) -> None:
    _write(tmp_path / "posts" / "entry.md")
    _write(tmp_path / "shared.md")
    try:
        (tmp_path / "posts" / "loop").symlink_to(tmp_path, target_is_directory=True)
        (tmp_path / "linked.md").symlink_to(tmp_path / "shared.md")
    except OSError:
        pytest.skip("symlinks are not supported here")

    files = list_files(tmp_path, suffix_filter(".md"))

    assert [path.name for path in files] == ["linked.md", "entry.md", "shared.md"]
