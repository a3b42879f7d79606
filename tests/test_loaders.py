import logging
from pathlib import Path

import pytest

from pagesmith.errors import DataFileError, FilesystemError
from pagesmith.loaders import load_data, load_includes

DATA_SUFFIXES = [".json", ".yaml", ".yml"]
INCLUDE_SUFFIXES = [".html", ".j2"]


def _write(path: Path, body: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(body, encoding="utf-8")


def test_load_data_reads_json_and_yaml_dialects(tmp_path: Path) -> None:
    _write(tmp_path / "site.json", '{"title": "My Site"}')
    _write(tmp_path / "menu.yml", "- home\n- about\n")
    _write(tmp_path / "nested" / "author.yaml", "---\nname: Ada\n---\n")
    _write(tmp_path / "ignored.txt", "nope")

    data = load_data(tmp_path, DATA_SUFFIXES)

    assert data == {
        "site": {"title": "My Site"},
        "menu": ["home", "about"],
        "author": {"name": "Ada"},
    }


def test_load_data_reads_yaml_with_document_marker(tmp_path: Path) -> None:
    _write(tmp_path / "settings.yaml", "---\ncolor: blue\n")

    assert load_data(tmp_path, DATA_SUFFIXES) == {"settings": {"color": "blue"}}


def test_load_data_warns_on_duplicate_keys(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    _write(tmp_path / "a" / "site.json", '{"from": "json"}')
    _write(tmp_path / "b" / "site.yml", "from: yaml\n")

    with caplog.at_level(logging.WARNING, logger="pagesmith.loaders"):
        data = load_data(tmp_path, DATA_SUFFIXES)

    assert data["site"] == {"from": "yaml"}
    assert any("Duplicate data key 'site'" in message for message in caplog.messages)


def test_load_data_rejects_malformed_json(tmp_path: Path) -> None:
    _write(tmp_path / "broken.json", "{not json")

    with pytest.raises(DataFileError):
        load_data(tmp_path, DATA_SUFFIXES)


def test_load_data_missing_directory_is_fatal(tmp_path: Path) -> None:
    with pytest.raises(FilesystemError):
        load_data(tmp_path / "missing", DATA_SUFFIXES)


def test_load_includes_splits_front_matter(tmp_path: Path) -> None:
    _write(tmp_path / "base.html", "---\ntitle: Base\n---\n<html>{{ content }}</html>\n")
    _write(tmp_path / "partials" / "footer.j2", "<footer>{{ data.site.title }}</footer>")

    includes = load_includes(tmp_path, INCLUDE_SUFFIXES)

    assert set(includes) == {"base", "footer"}
    assert includes["base"].frontmatter == {"title": "Base"}
    assert includes["base"].template == "<html>{{ content }}</html>\n"
    assert includes["footer"].frontmatter == {}
    assert includes["footer"].name == "footer"
