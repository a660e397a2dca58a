import io

from riffctl.commands import main, new_riff_command, new_root_command
from riffctl.config import Config


def _config(**kwargs):
    return Config(stdout=io.StringIO(), stderr=io.StringIO(), version="1.0", git_sha="abc", **kwargs)


def test_riff_command_empty():
    command = new_riff_command(_config())
    assert command.name == "riff"
    assert command.commands == []


def test_root_empty_prints_help(capsys):
    assert main([]) == 0
    assert "riff [command]" in capsys.readouterr().out


def test_root_help(capsys):
    assert main(["--help"]) == 0
    assert "riff [command]" in capsys.readouterr().out


def test_subcommand_help_with_flags(capsys):
    assert main(["completion", "--help"]) == 0
    assert "riff completion [flags]" in capsys.readouterr().out


def test_disabled_runtimes_hidden():
    root = new_root_command(_config(runtimes=frozenset({"core"})))
    hidden = {c.name for c in root.commands if c.hidden}
    assert hidden == {"streaming", "knative", "docs"}
    assert "The core runtime" in root.long
    assert "Knative Serving" not in root.long


def test_all_root_commands_present():
    root = new_root_command(_config())
    names = {c.name for c in root.commands}
    assert {"completion", "docs", "doctor", "core", "streaming", "knative"} <= names


def test_invalid_shell_errors(capsys):
    assert main(["completion", "--shell", "zorglub"]) == 1
    assert "invalid value: zorglub" in capsys.readouterr().err


def test_unknown_flag_errors():
    assert main(["--bogus"]) == 1


def test_docs_command(tmp_path):
    assert main(["docs", "-d", str(tmp_path)]) == 0
    names = {p.name for p in tmp_path.iterdir()}
    assert "riff.md" in names and "riff_doctor.md" in names
    assert "riff_docs.md" not in names
    assert (tmp_path / "riff.md").read_text().startswith('---\nid: riff\ntitle: "riff"\n---\n')