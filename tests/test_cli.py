"""CLI behaviour tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from drifty import cli
from drifty.cli import HELP_TEXT, _build_parser, main
from drifty.frontmatter import parse
from drifty.hashing import hash_file
from drifty.logging import configure_logging
from tests._fixtures.doc_repo import DocRepoBuilder


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "report"])
    assert args.verbose is True
    assert args.command == "report"


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["check", "--verbose"])
    assert args.verbose is True
    assert args.command == "check"


def test_cli_parses_report_format_and_target() -> None:
    parser = _build_parser()
    args = parser.parse_args(["report", "docs", "--format", "yaml"])
    assert args.target == "docs"
    assert args.format == "yaml"


def test_cli_rejects_unknown_report_format() -> None:
    parser = _build_parser()
    with pytest.raises(SystemExit):
        parser.parse_args(["report", "--format", "html"])


def test_cli_help_prints_usage(capsys: pytest.CaptureFixture[str]) -> None:
    main(["help"])
    assert capsys.readouterr().out.strip() == HELP_TEXT


def test_cli_init_and_add_round_trip(
    doc_repo: DocRepoBuilder, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    doc_repo.write({"README.md": "# Doc\n", "src/main.py": "print('hi')\n"})
    monkeypatch.chdir(doc_repo.path())

    main(["init", "README.md"])
    main(["add", "README.md", "src/main.py"])

    out = capsys.readouterr().out
    digest = hash_file(doc_repo.path("src/main.py"))
    assert "Initialized driftwatcher in README.md" in out
    assert f"Added 'src/main.py' to README.md (1 file(s), hash: {digest[:12]}...)" in out
    block = parse(doc_repo.read("README.md"))
    assert block is not None
    assert [(entry.pattern, entry.hash) for entry in block.entries] == [("src/main.py", digest)]


def test_cli_add_without_init_exits_with_error(
    doc_repo: DocRepoBuilder, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    doc_repo.write({"README.md": "# Doc\n", "a.txt": "a\n"})
    monkeypatch.chdir(doc_repo.path())

    with pytest.raises(SystemExit) as excinfo:
        main(["add", "README.md", "a.txt"])

    assert excinfo.value.code == 1
    assert "drifty init README.md" in capsys.readouterr().err


def test_cli_report_json_exits_non_zero_on_drift(
    doc_repo: DocRepoBuilder, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    doc_repo.write({"a.txt": "a\n", "README.md": '---\ndriftwatcher:\n  - "a.txt": stale\n---\n'})
    monkeypatch.chdir(doc_repo.path())

    with pytest.raises(SystemExit) as excinfo:
        main(["report", "--format", "json"])

    assert excinfo.value.code == 1
    assert json.loads(capsys.readouterr().out) == {"README.md": {"a.txt": "DRIFTED"}}


def test_cli_report_uses_configured_format(
    doc_repo: DocRepoBuilder, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    digest_source = {"a.txt": "a\n"}
    doc_repo.write(digest_source)
    digest = hash_file(doc_repo.path("a.txt"))
    doc_repo.write(
        {
            "README.md": f'---\ndriftwatcher:\n  - "a.txt": {digest}\n---\n',
            ".drifty.yml": "report:\n  format: json\n",
        }
    )
    monkeypatch.chdir(doc_repo.path())

    main(["report"])

    assert json.loads(capsys.readouterr().out) == {"README.md": {"a.txt": "CURRENT"}}


def test_cli_check_all_accepts_drifted_entries(
    doc_repo: DocRepoBuilder, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    doc_repo.write({"a.txt": "a\n", "README.md": '---\ndriftwatcher:\n  - "a.txt": stale\n---\n'})
    monkeypatch.chdir(doc_repo.path())

    main(["check", "--all"])

    out = capsys.readouterr().out
    assert "Found 0 current, 1 drifted, 0 missing" in out
    assert "Updated 1 entries." in out
    block = parse(doc_repo.read("README.md"))
    assert block is not None
    assert block.entries[0].hash == hash_file(doc_repo.path("a.txt"))


def test_cli_check_prompts_for_selection(
    doc_repo: DocRepoBuilder, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    doc_repo.write(
        {
            "a.txt": "a\n",
            "b.txt": "b\n",
            "README.md": '---\ndriftwatcher:\n  - "a.txt": stale\n  - "b.txt": stale\n---\n',
        }
    )
    monkeypatch.chdir(doc_repo.path())
    monkeypatch.setattr(cli, "_is_interactive", lambda: True)
    seen: list[list[str]] = []

    def _select(labels):  # type: ignore[no-untyped-def]
        seen.append(list(labels))
        return [1]

    monkeypatch.setattr(cli, "prompt_selection", _select)

    main(["check"])

    assert seen == [["README.md: a.txt", "README.md: b.txt"]]
    assert "Updated 1 entries." in capsys.readouterr().out
    block = parse(doc_repo.read("README.md"))
    assert block is not None
    assert block.entries[0].hash == "stale"
    assert block.entries[1].hash == hash_file(doc_repo.path("b.txt"))


def test_cli_validate_reports_missing_hash(
    doc_repo: DocRepoBuilder, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    doc_repo.write({"a.txt": "a\n", "README.md": '---\ndriftwatcher:\n  - "a.txt":\n---\n'})
    monkeypatch.chdir(doc_repo.path())

    with pytest.raises(SystemExit) as excinfo:
        main(["validate"])

    assert excinfo.value.code == 1
    assert "README.md: Entry 'a.txt' has no hash" in capsys.readouterr().err


def test_cli_validate_without_tracked_documents(
    doc_repo: DocRepoBuilder, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    doc_repo.write({"README.md": "# Doc\n"})
    monkeypatch.chdir(doc_repo.path())

    main(["validate"])

    assert "No driftwatcher entries found." in capsys.readouterr().out


def test_cli_log_file_receives_debug_output(
    doc_repo: DocRepoBuilder, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    doc_repo.write({"a.txt": "a\n", "README.md": '---\ndriftwatcher:\n  - "a.txt": stale\n---\n'})
    monkeypatch.chdir(doc_repo.path())
    log_file = tmp_path / "drifty.log"

    with pytest.raises(SystemExit):
        main(["--log-file", str(log_file), "report"])
    configure_logging()

    assert log_file.exists()
