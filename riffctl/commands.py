"""The command tree and the command-line entry point."""

from __future__ import annotations

import sys

from riffctl import config as _config
from riffctl.command import Command, Flag, UsageError, parse_flags
from riffctl.completion import CompletionOptions
from riffctl.config import (
    CONFIG_FLAG, CORE_RUNTIME, DIRECTORY_FLAG, KNATIVE_RUNTIME, KUBECONFIG_FLAG,
    KUBECONFIG_FLAG_DEPRECATED, NAMESPACE_FLAG, NO_COLOR_FLAG, SHELL_FLAG,
    STREAMING_RUNTIME, Config,
)
from riffctl.docs import DocsOptions
from riffctl.doctor import DoctorOptions


def _validated(options):
    error = options.validate().to_error()
    if error is not None:
        raise error
    return options


def new_riff_command(config: Config) -> Command:
    n = config.name
    return Command(
        use="riff",
        short="riff is for functions",
        long=(
            f"The {n} CLI combines with the projectriff system CRDs to build, run and wire\n"
            "workloads (functions, applications and containers). The CRDs provide the riff\n"
            "API of which this CLI is a client.\n\n"
            f"Before running {n}, please install the projectriff system and its dependencies.\n\n"
            "The application, function and container commands define build plans and the\n"
            "credential commands to authenticate builds to container registries.\n\n"
            "Runtimes provide ways to execute the workloads. Different runtimes provide\n"
            "alternate execution models and capabilities."
        ),
    )


_RUNTIMES = (
    (CORE_RUNTIME, "core runtime for riff workloads",
     "The core runtime uses core Kubernetes resources like Deployment and Service to\n"
     "expose the workload over HTTP."),
    (STREAMING_RUNTIME, "streaming runtime for riff functions",
     "The streaming runtime maps one or more input and output streams to a function."),
    (KNATIVE_RUNTIME, "Knative runtime for riff workloads",
     "The Knative runtime uses Knative Serving to expose the workload over HTTP with\n"
     "zero-to-n autoscaling and managed ingress."),
)


def new_root_command(config: Config) -> Command:
    n = config.name
    root = new_riff_command(config)
    root.use = n
    dirty = ", with local modifications" if config.git_dirty else ""
    root.version = f"{config.version} ({config.git_sha}{dirty})"
    root.flags.append(Flag("--version", "display CLI version", default=False, takes_value=False))
    kube_help = "kubectl config file (default is $HOME/.kube/config)"
    root.persistent_flags.extend([
        Flag(CONFIG_FLAG, f"config file (default is $HOME/.{n}.yaml)"),
        Flag(KUBECONFIG_FLAG, kube_help),
        Flag(KUBECONFIG_FLAG_DEPRECATED, kube_help, deprecated=f"renamed to {KUBECONFIG_FLAG}"),
        Flag(NO_COLOR_FLAG, "disable color output in terminals", default=_config.no_color, takes_value=False),
    ])
    for name, short, doc in _RUNTIMES:
        enabled = name in config.runtimes
        if enabled:
            root.long = f"{root.long}\n\n{doc}"
        root.add_command(Command(use=name, short=short, long=doc, hidden=not enabled))

    root.add_command(Command(
        use="completion",
        short="generate shell completion script",
        long=(
            "Generate the completion script for your shell. The script is printed to stdout\n"
            "and needs to be placed in the appropriate directory on your system."
        ),
        example=f"{n} completion\n{n} completion {SHELL_FLAG} zsh",
        flags=[Flag(SHELL_FLAG, "shell to generate completion for: bash or zsh", default="bash")],
        run=lambda cmd, values, args: _validated(CompletionOptions(shell=values["shell"])).exec(config, cmd.root()),
    ))
    root.add_command(Command(
        use="docs",
        short="generate docs in Markdown for this CLI",
        example=f"{n} docs",
        hidden=True,
        flags=[Flag(DIRECTORY_FLAG, "the output directory for the docs", default="docs", short="d")],
        run=lambda cmd, values, args: _validated(DocsOptions(directory=values["directory"])).exec(cmd.root()),
    ))
    root.add_command(Command(
        use="doctor",
        aliases=("doc",),
        short=f"check {n}'s requirements are installed",
        long=(
            f"Check that {n} is installed.\n\n"
            "The doctor checks that necessary system components are installed and the user\n"
            "has access to resources in the namespace.\n\n"
            "The doctor is not a tool for monitoring the health of the cluster."
        ),
        example="riff doctor",
        flags=[Flag(NAMESPACE_FLAG, "kubernetes namespace", default="default", short="n")],
        run=lambda cmd, values, args: _validated(DoctorOptions(namespace=values["namespace"])).exec(config),
    ))
    return root


def main(argv=None) -> int:
    """Run the CLI and return its exit status."""
    config = Config()
    root = new_root_command(config)
    try:
        command, rest = root.find(list(sys.argv[1:] if argv is None else argv))
        values, positional = parse_flags(command, rest)
    except UsageError as error:
        config.stderr.write(f"Error: {error}\n")
        return 1

    config.viper_config_file = values.get("config") or ""
    deprecated = values.get(KUBECONFIG_FLAG_DEPRECATED.lstrip("-"))
    if deprecated:
        config.stderr.write(f"Flag {KUBECONFIG_FLAG_DEPRECATED} has been deprecated, renamed to {KUBECONFIG_FLAG}\n")
    config.kube_config_file = values.get("kubeconfig") or deprecated or ""
    _config.no_color = bool(values.get("no-color"))

    if command is root and values.get("version") and not values.get("help"):
        config.stdout.write(f"{root.name} version {root.version}\n")
        return 0
    if values.get("help") or command.run is None:
        config.stdout.write(command.help_text())
        return 0
    try:
        command.run(command, values, positional)
    except (ValueError, LookupError, RuntimeError, OSError) as error:
        config.stderr.write(f"Error: {error}\n")
        return 1
    return 0