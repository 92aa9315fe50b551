"""
Shell integration for cdmark.

A child process cannot change its parent's directory, so navigation needs a
small shell function around ``cdmark go``. ``render_init_script`` produces
the classic short commands on top of the CLI:

    addcd [-b] [-n [NAME]] [DIR]   add a bookmark (-bn / -nb also work)
    lcd / lscd [-b] [-r|-a]        list bookmarks
    gocd KEY                       cd to a bookmark
    rcd / rmcd [-b] KEY            remove a bookmark
    namecd -n KEY NAME             name or rename a bookmark
    namecd -un KEY                 remove a name
    clearcd                        remove all normal bookmarks

Load it from your shell rc file::

    eval "$(cdmark shell-init bash)"
"""

from cdmark.constants import SUPPORTED_SHELLS

_FUNCTIONS = r'''
addcd() {
    local args=() arg
    for arg in "$@"; do
        case "$arg" in
            -nb) args+=("-bn") ;;
            *) args+=("$arg") ;;
        esac
    done
    command @COMMAND@ add "${args[@]}"
}

lcd() {
    local args=() arg
    for arg in "$@"; do
        case "$arg" in
            -abs) args+=("-a") ;;
            -rel) args+=("-r") ;;
            *) args+=("$arg") ;;
        esac
    done
    command @COMMAND@ list "${args[@]}"
}

lscd() { lcd "$@"; }

gocd() {
    if [ -z "$1" ]; then
        echo "Usage: gocd <name|index>" >&2
        return 1
    fi
    local target
    target="$(command @COMMAND@ go "$1")" || return
    cd -- "$target"
}

rcd() { command @COMMAND@ remove "$@"; }

rmcd() { rcd "$@"; }

namecd() {
    local action="$1"
    [ $# -gt 0 ] && shift
    case "$action" in
        -n) command @COMMAND@ name "$@" ;;
        -un) command @COMMAND@ unname "$@" ;;
        *)
            echo "Usage:" >&2
            echo "  namecd -n <index|oldname> <newname>   # assign or rename" >&2
            echo "  namecd -un <name|index>               # remove name" >&2
            return 1
            ;;
    esac
}

clearcd() { command @COMMAND@ clear; }

_cdmark_bookmark_completion() {
    local cur="${COMP_WORDS[COMP_CWORD]}"
    local IFS=$'\n'
    COMPREPLY=( $(compgen -W "$(command @COMMAND@ names 2>/dev/null)" -- "$cur") )
}
complete -F _cdmark_bookmark_completion gocd rmcd rcd namecd
'''

_ZSH_PREAMBLE = '''autoload -U +X compinit && compinit
autoload -U +X bashcompinit && bashcompinit
'''


def render_init_script(shell: str = "bash", command: str = "cdmark") -> str:
    """
    Build the shell functions and completion for the given shell.

    Args:
        shell: "bash" or "zsh"
        command: How the cdmark executable is invoked, inserted verbatim

    Raises:
        ValueError: For an unsupported shell
    """
    if shell not in SUPPORTED_SHELLS:
        raise ValueError(
            f"Unsupported shell '{shell}' (expected one of: {', '.join(SUPPORTED_SHELLS)})"
        )

    body = _FUNCTIONS.replace("@COMMAND@", command)
    header = f"# cdmark shell integration ({shell})\n"
    if shell == "zsh":
        header += _ZSH_PREAMBLE
    return header + body.lstrip("\n")
