import pytest

from riffctl.command import Command, Flag, UsageError, parse_flags


def _tree():
    root = Command(use="riff", short="riff is for functions",
                   persistent_flags=[Flag("--kubeconfig", "kube config")])
    function = root.add_command(Command(use="function", short="functions"))
    create = function.add_command(
        Command(use="create", short="create a function", args=("<name>",),
                flags=[Flag("--image", "image", short="i")], run=lambda c, v, a: None)
    )
    doctor = root.add_command(Command(use="doctor", aliases=("doc",), short="check", run=lambda c, v, a: None))
    return root, function, create, doctor


def test_empty_riff_command_help():
    root = Command(use="riff", short="riff is for functions")
    assert root.help_text().startswith("riff is for functions\n\nUsage:\n")


def test_command_path_and_walk():
    root, function, create, doctor = _tree()
    assert create.command_path() == "riff function create"
    assert [c.name for c in root.walk()] == ["riff", "function", "create", "doctor"]


def test_use_line_includes_args():
    _, _, create, _ = _tree()
    assert create.use_line() == "riff function create <name> [flags]"


def test_help_text_lists_commands_and_flags():
    root, _, create, doctor = _tree()
    text = root.help_text()
    assert "riff [command]" in text
    assert "Available Commands:" in text
    assert "--kubeconfig" in create.help_text()
    assert "Aliases:\n  doctor, doc" in doctor.help_text()


def test_parse_flags():
    _, _, create, _ = _tree()
    values, positional = parse_flags(create, ["x", "-i", "img", "--kubeconfig=k"])
    assert values["image"] == "img"
    assert values["kubeconfig"] == "k"
    assert values["help"] is False
    assert positional == ["x"]


def test_parse_flags_errors():
    _, _, create, _ = _tree()
    with pytest.raises(UsageError):
        parse_flags(create, ["--bogus"])
    with pytest.raises(UsageError):
        parse_flags(create, ["--image"])