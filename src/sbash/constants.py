"""Literal constants used by sbash."""

APP_NAME = "sbash"

# Program name used when no script path is available.
EXE_NAME = "sbash"

# A script whose only public function has this name takes its arguments
# directly, without a subcommand token.
ENTRY_POINT_NAME = "main"

# Reserved argument spelling: forward all remaining invocation arguments.
FORWARD_MARKER = "..."

KEYWORD_PUB = "pub"
KEYWORD_INLINE = "inline"
KEYWORD_FN = "fn"

COMMENT_CHAR = "#"
DOC_PRE_MARKER = "#>"
DOC_POST_MARKER = "#<"
DOC_SCRIPT_MARKER = "#^"

IDENT_START_CHARS = frozenset(
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_"
)
ARGUMENT_CONTINUE_CHARS = IDENT_START_CHARS | frozenset("0123456789")
FUNCTION_CONTINUE_CHARS = ARGUMENT_CONTINUE_CHARS | frozenset("-")

# Rendered function templates.
EMPTY_BODY_TEMPLATE = "{name} () {{ :; }}"
INLINE_TEMPLATE = "{name} () {{ {bindings}\n{body}}};"
SUBSHELL_TEMPLATE = "{name} () {{ ( {bindings}\n{body}) }};"
BINDING_TEMPLATE = '{name}="$1"; shift; '

STRICT_MODE_PROLOGUE = "set -euo pipefail"
INVOCATION_TEMPLATE = '{name} "$@"'

DEFAULT_SHELL = "bash"
ENV_SHELL = "SBASH_SHELL"
ENV_LOG_FILE = "SBASH_LOG_FILE"

COMPLETION_SHELLS = ("bash", "zsh", "fish")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2

ERROR_PREFIX = "ERROR:"
