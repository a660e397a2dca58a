# riffctl

A command line client for a Kubernetes platform that builds and runs
functions, applications and containers. It checks that the platform is
installed and that you can reach its resources, prints shell completion
scripts, and writes Markdown reference pages for its own commands.

## Install

    pip install .

To run the tests as well:

    pip install ".[test]"
    pytest

## Usage

The `riffctl` command runs `riffctl.commands:main`. In help and usage text
the CLI calls itself `riff`, the default `Config.name`.

### doctor

    riffctl doctor
    riffctl doctor --namespace my-namespace
    riffctl doc -n my-namespace

The doctor talks to the cluster through `kubectl`, which must be on your
`PATH`; `--kubeconfig` picks the kubectl config file. The namespace
defaults to `default`.

The first table lists the namespace and `riff-system` as `ok` or
`missing`. The second lists each resource with your read access (`get`,
`list`, `watch`) and your write access (the other verbs). Each access is
one of:

- `allowed`
- `denied`
- `mixed`: some verbs are allowed, some denied
- `missing`: the custom resource type is not installed
- `unknown`: the access review gave no answer
- `n/a`: no verbs of that kind were checked

Resources of the core, streaming and Knative runtimes are checked only
when that runtime is enabled.

### completion

    riffctl completion
    riffctl completion --shell zsh

Prints a bash (the default) or zsh completion script. Any other shell is
rejected. The bash script also completes resource names for `delete`,
`status` and `tail` sub-commands by calling `kubectl` or the CLI itself.

### docs

    riffctl docs
    riffctl docs --directory reference
    riffctl docs -d reference

Writes one Markdown page per visible command, each starting with a
front-matter header carrying an `id` and `title`. The directory defaults
to `docs` and is created if needed. The `docs` command itself is hidden
from help.

### Other options

    riffctl --version
    riffctl --help
    riffctl doctor --help

`--no-color` turns off colored output. `--config` is accepted for a config
file path. `--kube-config` still works but is deprecated in favour of
`--kubeconfig`.

## Runtimes

`Config.runtimes` lists the enabled runtimes: `core`, `streaming` and
`knative`, all enabled by default. A disabled runtime's command is hidden
and its description is left out of the root help.

## What it does not do

The `core`, `streaming` and `knative` commands only print help; they have
no sub-commands for managing deployers, processors, streams, providers or
adapters. There are no `application`, `function`, `container` or
`credential` commands, so the package cannot create, build, list, delete
or tail workloads. The `--config` file is recorded but not read.

## Library use

- `riffctl.commands.new_root_command(config)` builds the command tree from
  a `riffctl.config.Config`; `riffctl.commands.main(argv)` runs it and
  returns an exit status.
- `riffctl.doctor.DoctorOptions(namespace=...).exec(config)` runs the
  checks. Set `Config.client` to any object with `get_namespace`,
  `get_custom_resource_definition` and `create_access_review` to use it
  instead of `riffctl.doctor.KubectlClient`; raise
  `riffctl.doctor.NotFoundError` for a missing resource.
- `riffctl.completion.generate_bash_completion` and
  `generate_zsh_completion` build scripts for any `riffctl.command.Command`
  tree.
- `riffctl.docs.generate_markdown_tree(root, directory)` writes the pages
  and returns their paths.
- Each options class has `validate()`, which returns
  `riffctl.config.FieldErrors`; `FieldErrors.to_error()` gives a
  `ValidationError` to raise, or `None`.