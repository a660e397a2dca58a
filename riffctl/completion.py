"""Shell completion scripts."""

from __future__ import annotations

from dataclasses import dataclass

from riffctl.command import Command, all_flags
from riffctl.config import SHELL_FLAG, Config, FieldErrors, error_invalid_value, error_missing_field

SHELLS = ("bash", "zsh")

_BASH_CUSTOM = r"""
__@N@_override_flag_list=(--kubeconfig --namespace -n)
__@N@_override_flags()
{
	local ${__@N@_override_flag_list[*]##*-} two_word_of of var
	for w in "${words[@]}"; do
		if [ -n "${two_word_of}" ]; then
			eval "${two_word_of##*-}=\"${two_word_of}=\${w}\""
			two_word_of=
			continue
		fi
		for of in "${__@N@_override_flag_list[@]}"; do
			case "${w}" in
				${of}=*)
					eval "${of##*-}=\"${w}\""
					;;
				${of})
					two_word_of="${of}"
					;;
			esac
		done
	done
	for var in "${__@N@_override_flag_list[@]##*-}"; do
		if eval "test -n \"\$${var}\""; then
			eval "echo -n \${${var}}' '"
		fi
	done
}

__@N@_list_kubectl()
{
	local template
	template="{{ range .items }}{{ .metadata.name }} {{ end }}"
	local kubectl_out
	if kubectl_out=$(kubectl get $(__@N@_override_flags) -o template --template="${template}" "$@" 2>/dev/null); then
		COMPREPLY=( $( compgen -W "${kubectl_out}" -- "$cur" ) )
	fi
}

__@N@_list_namespaces()
{
	__@N@_list_kubectl namespace
}

__@N@_list_knative_configurations()
{
	__@N@_list_kubectl configurations.serving.knative.dev
}

__@N@_list_knative_services()
{
	__@N@_list_kubectl services.serving.knative.dev
}

__@N@_list_streaming_provisioner_services()
{
	__@N@_list_kubectl --selector streaming.projectriff.io/provisioner services
}

__@N@_list_functions()
{
	__@N@_list_resource 'function list'
}

__@N@_list_containers()
{
	__@N@_list_resource 'container list'
}

__@N@_list_applications()
{
	__@N@_list_resource 'application list'
}

__@N@_list_resource()
{
	__@N@_debug "listing $1"
	local @N@_output out
	if @N@_output=$(@N@ $1 $(__@N@_override_flags) 2>/dev/null); then
		out=($(echo "${@N@_output}" | awk 'NR>1 {print $1}'))
		COMPREPLY=( $( compgen -W "${out[*]}" -- "$cur" ) )
	fi
}

__@N@_custom_func() {
	case ${last_command} in
		@N@_application_delete | @N@_application_status | @N@_application_tail)
			__@N@_list_resource 'application list'
			return
			;;
		@N@_container_delete | @N@_container_status)
			__@N@_list_resource 'container list'
			return
			;;
		@N@_core_deployer_delete | @N@_core_deployer_status | @N@_core_deployer_tail)
			__@N@_list_resource 'core deployer list'
			return
			;;
		@N@_credential_delete)
			__@N@_list_resource 'credential list'
			return
			;;
		@N@_function_delete | @N@_function_status | @N@_function_tail)
			__@N@_list_resource 'function list'
			return
			;;
		@N@_knative_deployer_delete | @N@_knative_deployer_status | @N@_knative_deployer_tail)
			__@N@_list_resource 'knative deployer list'
			return
			;;
		@N@_knative_adapter_delete | @N@_knative_adapter_status)
			__@N@_list_resource 'knative adapter list'
			return
			;;
		@N@_streaming_kafka-provider_delete | @N@_streaming_kafka-provider_status)
			__@N@_list_resource 'streaming kafka-provider list'
			return
			;;
		@N@_streaming_processor_delete | @N@_streaming_processor_status | @N@_streaming_processor_tail)
			__@N@_list_resource 'streaming processor list'
			return
			;;
		@N@_streaming_stream_delete | @N@_streaming_stream_status)
			__@N@_list_resource 'streaming stream list'
			return
			;;
		*)
			;;
	esac
}
"""


def make_bash_completion(name: str) -> str:
    """Bash functions that complete resource names for the CLI called ``name``."""
    return _BASH_CUSTOM.replace("@N@", name)


def _tables(root: Command) -> tuple[list[str], list[str]]:
    subcommands, flags = [], []
    for command in root.walk():
        key = command.command_path().replace(" ", "_")
        names = " ".join(c.name for c in command.visible_commands())
        flag_names = []
        for flag in all_flags(command):
            if flag.hidden or flag.deprecated:
                continue
            flag_names.append(flag.name)
            if flag.short:
                flag_names.append(f"-{flag.short}")
        subcommands.append(f"\t['{key}']='{names}'")
        flags.append(f"\t['{key}']='{' '.join(flag_names)}'")
    return subcommands, flags


def generate_bash_completion(root: Command, custom: str = "") -> str:
    """A bash completion script for the command tree under ``root``."""
    n = root.name
    subcommands, flags = _tables(root)
    if "_custom_func()" not in custom:
        custom += f"\n__{n}_custom_func() {{\n\t:\n}}\n"
    return "".join([
        f"# bash completion for {n}\n",
        f"\n__{n}_debug()\n{{\n",
        '\tif [[ -n ${BASH_COMP_DEBUG_FILE} ]]; then\n',
        '\t\techo "$*" >> "${BASH_COMP_DEBUG_FILE}"\n\tfi\n}\n',
        custom,
        f"\ndeclare -A __{n}_subcommands=(\n", "\n".join(subcommands), "\n)\n",
        f"declare -A __{n}_flags=(\n", "\n".join(flags), "\n)\n",
        f"\n__{n}_start()\n{{\n",
        f'\tlocal cur="${{COMP_WORDS[COMP_CWORD]}}" last_command="{n}" w\n',
        '\tlocal words=("${COMP_WORDS[@]}")\n',
        '\tfor w in "${COMP_WORDS[@]:1:COMP_CWORD-1}"; do\n',
        '\t\t[[ "$w" == -* ]] && continue\n',
        f'\t\tif [[ " ${{__{n}_subcommands[$last_command]}} " == *" $w "* ]]; then\n',
        '\t\t\tlast_command="${last_command}_${w}"\n\t\tfi\n\tdone\n',
        "\tCOMPREPLY=()\n",
        '\tif [[ "$cur" == -* ]]; then\n',
        f'\t\tCOMPREPLY=( $(compgen -W "${{__{n}_flags[$last_command]}}" -- "$cur") )\n',
        "\t\treturn\n\tfi\n",
        f"\t__{n}_custom_func\n",
        "\tif [[ ${#COMPREPLY[@]} -eq 0 ]]; then\n",
        f'\t\tCOMPREPLY=( $(compgen -W "${{__{n}_subcommands[$last_command]}}" -- "$cur") )\n',
        "\tfi\n}\n",
        f"\ncomplete -o default -F __{n}_start {n}\n",
    ])


def generate_zsh_completion(root: Command) -> str:
    """A zsh completion script for the command tree under ``root``."""
    n = root.name
    subcommands, flags = _tables(root)
    return "".join([
        f"#compdef _{n} {n}\n\n",
        f"_{n}() {{\n",
        f'\tlocal cmd="{n}" w\n',
        "\tlocal -A subs flags\n",
        "\tsubs=(\n", "\n".join(s.replace("['", "'").replace("']=", "' ") for s in subcommands), "\n\t)\n",
        "\tflags=(\n", "\n".join(f.replace("['", "'").replace("']=", "' ") for f in flags), "\n\t)\n",
        "\tfor w in ${words[2,CURRENT-1]}; do\n",
        "\t\t[[ $w == -* ]] && continue\n",
        '\t\tif [[ " ${subs[$cmd]} " == *" $w "* ]]; then cmd="${cmd}_${w}"; fi\n',
        "\tdone\n",
        "\tif [[ $PREFIX == -* ]]; then\n\t\tcompadd -- ${=flags[$cmd]}\n",
        "\telse\n\t\tcompadd -- ${=subs[$cmd]}\n\tfi\n}\n",
        f"\ncompdef _{n} {n}\n",
    ])


@dataclass
class CompletionOptions:
    shell: str = "bash"

    def validate(self) -> FieldErrors:
        errors = FieldErrors()
        if not self.shell:
            errors = errors.also(error_missing_field(SHELL_FLAG))
        elif self.shell not in SHELLS:
            errors = errors.also(error_invalid_value(self.shell, SHELL_FLAG))
        return errors

    def exec(self, config: Config, root: Command) -> None:
        if self.shell == "bash":
            config.stdout.write(generate_bash_completion(root, make_bash_completion(config.name)))
        elif self.shell == "zsh":
            config.stdout.write(generate_zsh_completion(root))
        else:
            raise ValueError(f"invalid shell: {self.shell}")