from __future__ import annotations

import json
import textwrap
from pathlib import Path

import httpx
import pytest

import inline_snippets.transform as transform_module
from conftest import make_transport
from inline_snippets.cli import cli

BLOB = "https://github.com/owner/repo/blob/main"
RAW = "https://raw.githubusercontent.com/owner/repo/main"
FILES = {f"{RAW}/main.go": "package main\n\nfunc main() {\n\tprintln(1)\n}\n"}


def _tree(*urls: str, label: str = "inline") -> dict:
    return {
        "type": "root",
        "children": [
            {
                "type": "paragraph",
                "children": [
                    {"type": "link", "url": url, "children": [{"type": "text", "value": label}]}
                ],
            }
            for url in urls
        ],
    }


def _write_tree(tmp_path: Path, tree: dict, name: str = "post.json") -> Path:
    path = tmp_path / name
    path.write_text(json.dumps(tree), encoding="utf-8")
    return path


def _write_pyproject(base: Path, body: str) -> Path:
    path = base / "pyproject.toml"
    path.write_text(textwrap.dedent(body).lstrip(), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def fake_github(monkeypatch):
    requested: list[str] = []
    monkeypatch.setattr(
        transform_module,
        "open_client",
        lambda config: httpx.AsyncClient(transport=make_transport(FILES, requested)),
    )
    return requested


def test_cli_prints_transformed_tree(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write_tree(tmp_path, _tree(f"{BLOB}/main.go#L3-L5"))

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 0, result.output
    output = json.loads(result.stdout)
    assert output["children"][0]["children"][0] == {
        "type": "code",
        "lang": "go",
        "meta": None,
        "value": "func main() {\n\tprintln(1)\n}",
    }
    assert json.loads(target.read_text(encoding="utf-8")) == _tree(f"{BLOB}/main.go#L3-L5")


def test_cli_in_place_rewrites_file(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write_tree(tmp_path, _tree(f"{BLOB}/main.go#L1-L1"))

    result = cli_runner.invoke(cli, ["--in-place", str(target)])

    assert result.exit_code == 0, result.output
    assert result.output == ""
    code = json.loads(target.read_text(encoding="utf-8"))["children"][0]["children"][0]
    assert code["value"] == "package main"


def test_cli_origin_comment_and_marker(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    url = f"{BLOB}/main.go#L1-L1"
    target = _write_tree(tmp_path, _tree(url, label="embed"))

    result = cli_runner.invoke(
        cli, ["--marker", "embed", "--origin-comment", "Source: <url>", str(target)]
    )

    assert result.exit_code == 0, result.output
    code = json.loads(result.stdout)["children"][0]["children"][0]
    assert code["value"] == f"// Source: {url}\npackage main"


def test_cli_reads_pyproject_settings(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    _write_pyproject(
        tmp_path,
        """
        [tool.inline-snippets]
        inline_marker = "code"
        """,
    )
    target = _write_tree(tmp_path, _tree(f"{BLOB}/main.go#L1-L1", label="code"))

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)["children"][0]["children"][0]["type"] == "code"


def test_cli_reports_failed_fetch_and_keeps_link(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    tree = _tree(f"{BLOB}/missing.go#L1-L2", f"{BLOB}/main.go#L1-L1")
    target = _write_tree(tmp_path, tree)

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 0
    output = json.loads(result.stdout)
    assert output["children"][0]["children"][0]["type"] == "link"
    assert output["children"][1]["children"][0]["type"] == "code"
    assert f"Failed to fetch {RAW}/missing.go" in result.stderr


def test_cli_fails_on_malformed_reference(cli_runner, tmp_path, monkeypatch, fake_github):
    monkeypatch.chdir(tmp_path)
    tree = _tree(f"{BLOB}/main.go#L1-L1", f"{BLOB}/main.go#L7")
    target = _write_tree(tmp_path, tree)

    result = cli_runner.invoke(cli, ["--in-place", str(target)])

    assert result.exit_code == 1
    assert "Expected #L<number>-L<number>" in result.output
    assert fake_github == []
    assert json.loads(target.read_text(encoding="utf-8")) == tree


def test_cli_rejects_invalid_json(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = tmp_path / "broken.json"
    target.write_text("{broken", encoding="utf-8")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 1
    assert "Invalid JSON" in result.output


def test_cli_rejects_non_json_file(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = tmp_path / "post.md"
    target.write_text("[inline](https://github.com/o/r/blob/main/a.py#L1-L2)\n", encoding="utf-8")

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 2
    assert "Supported extensions" in result.output


def test_cli_rejects_invalid_config(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = _write_tree(tmp_path, _tree())

    result = cli_runner.invoke(cli, ["--timeout", "-1", str(target)])

    assert result.exit_code == 2
    assert "`timeout` must be positive" in result.output


def test_cli_enforces_max_file_size(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("INLINE_SNIPPETS_MAX_FILE_SIZE", "10")
    target = _write_tree(tmp_path, _tree(f"{BLOB}/main.go#L1-L1"))

    result = cli_runner.invoke(cli, [str(target)])

    assert result.exit_code == 1
    assert "exceeds the maximum allowed size" in result.output


def test_cli_in_place_refuses_symlinked_tree(cli_runner, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    tree = _tree(f"{BLOB}/main.go#L1-L1")
    target = _write_tree(tmp_path, tree)
    link = tmp_path / "alias.json"
    link.symlink_to(target)

    result = cli_runner.invoke(cli, ["--in-place", str(link)])

    assert result.exit_code == 2
    assert "Symlinks are not supported" in result.output
    assert json.loads(target.read_text(encoding="utf-8")) == tree
