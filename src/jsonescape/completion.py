from jsonescape.error import UnsupportedShellError
from jsonescape.types import NAME

BASH_COMPLETION = f"""# bash completion for {NAME}
_{NAME}() {{
    local cur prev opts
    COMPREPLY=()
    cur="${{COMP_WORDS[COMP_CWORD]}}"
    prev="${{COMP_WORDS[COMP_CWORD-1]}}"
    opts="-h --help -V --version -u --unescape -q --quote -r --raw -f --file -o --output -l --lines -0 --null -a --ascii --html-safe -s --strict --replace --stdin -v --verbose --completion"

    case "${{prev}}" in
        -f|--file|-o|--output)
            COMPREPLY=( $(compgen -f -- "${{cur}}") )
            return 0
            ;;
        --completion)
            COMPREPLY=( $(compgen -W "bash zsh fish" -- "${{cur}}") )
            return 0
            ;;
    esac

    if [[ ${{cur}} == -* ]]; then
        COMPREPLY=( $(compgen -W "${{opts}}" -- "${{cur}}") )
        return 0
    fi
}}
complete -F _{NAME} {NAME}
"""

ZSH_COMPLETION = r"""#compdef jsonescape

_jsonescape() {
    _arguments \
        '(-h --help)'{-h,--help}'[Show help]' \
        '(-V --version)'{-V,--version}'[Show version]' \
        '(-u --unescape)'{-u,--unescape}'[Unescape mode]' \
        '(-q --quote)'{-q,--quote}'[Wrap in quotes]' \
        '(-r --raw)'{-r,--raw}'[Raw output]' \
        '*'{-f,--file}'[Input file]:file:_files' \
        '(-o --output)'{-o,--output}'[Output file]:file:_files' \
        '(-l --lines -0 --null)'{-l,--lines}'[Line mode]' \
        '(-0 --null -l --lines)'{-0,--null}'[Null-delimited input]' \
        '(-a --ascii)'{-a,--ascii}'[ASCII only]' \
        '--html-safe[HTML safe escaping]' \
        '(-s --strict --replace)'{-s,--strict}'[Strict UTF-8]' \
        '(-s --strict)--replace[Replace invalid UTF-8]' \
        '--stdin[Read from stdin]' \
        '(-v --verbose)'{-v,--verbose}'[Debug logging]' \
        '--completion[Generate completion]:shell:(bash zsh fish)' \
        '*:string:'
}

_jsonescape "$@"
"""

FISH_COMPLETION = r"""# fish completion for jsonescape
complete -c jsonescape -s h -l help -d 'Show help'
complete -c jsonescape -s V -l version -d 'Show version'
complete -c jsonescape -s u -l unescape -d 'Unescape mode'
complete -c jsonescape -s q -l quote -d 'Wrap in quotes'
complete -c jsonescape -s r -l raw -d 'Raw output (no trailing newline)'
complete -c jsonescape -s f -l file -r -d 'Input file'
complete -c jsonescape -s o -l output -r -d 'Output file'
complete -c jsonescape -s l -l lines -d 'Process each line separately'
complete -c jsonescape -s 0 -l null -d 'Null-delimited input'
complete -c jsonescape -s a -l ascii -d 'Escape non-ASCII as \\uXXXX'
complete -c jsonescape -l html-safe -d 'Escape <, >, & for HTML'
complete -c jsonescape -s s -l strict -d 'Reject invalid UTF-8'
complete -c jsonescape -l replace -d 'Replace invalid UTF-8'
complete -c jsonescape -l stdin -d 'Read from stdin'
complete -c jsonescape -s v -l verbose -d 'Debug logging'
complete -c jsonescape -l completion -xa 'bash zsh fish' -d 'Generate shell completion'
"""

COMPLETIONS = {
    "bash": BASH_COMPLETION,
    "zsh": ZSH_COMPLETION,
    "fish": FISH_COMPLETION,
}


def get_completion_script(shell: str) -> str:
    try:
        return COMPLETIONS[shell.lower()]
    except KeyError:
        raise UnsupportedShellError(shell, list(COMPLETIONS)) from None
