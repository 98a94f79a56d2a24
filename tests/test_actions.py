from pathlib import Path

from diffscope_ci import actions


def test_escape_data():
    assert actions.escape_data("50% done\nnext\r") == "50%25 done%0Anext%0D"


def test_group_closes_on_error(capsys):
    try:
        with actions.group("Phase"):
            raise RuntimeError("boom")
    except RuntimeError:
        pass
    out = capsys.readouterr().out
    assert out.splitlines() == ["::group::Phase", "::endgroup::"]


def test_set_output_multiline_to_file(tmp_path: Path, monkeypatch):
    out_file = tmp_path / "output"
    monkeypatch.setenv("GITHUB_OUTPUT", str(out_file))

    actions.set_output("files", "a.txt\nb/c.txt")

    lines = out_file.read_text().splitlines()
    assert lines[0].startswith("files<<ghadelimiter_")
    delimiter = lines[0].split("<<", 1)[1]
    assert lines[1:] == ["a.txt", "b/c.txt", delimiter]


def test_set_output_without_output_file(monkeypatch, capsys):
    monkeypatch.delenv("GITHUB_OUTPUT", raising=False)
    actions.set_output("files", "")
    assert capsys.readouterr().out == "files=\n"
