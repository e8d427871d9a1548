"""Usage and reference text rendered from the command schema."""

from __future__ import annotations

from blockstack_cli.cli.config import DEFAULT_CONFIG_PATH
from blockstack_cli.cli.schema import SCHEMA, CommandSchema, CommandSpec

DEFAULT_PROG = "blockstack-cli"

COMMAND_LIST_INDENT = 4
COMMAND_LIST_LIMIT = 70

_OPTIONS_HELP = f"""Options can be:
    -c                  Path to a config file (defaults to
                        {DEFAULT_CONFIG_PATH})

    -e                  Estimate the BTC cost of an transaction (in satoshis).
                        Do not generate or send any transactions.

    -t                  Use the public testnet instead of mainnet.

    -i                  Use integration test framework instead of mainnet.

    -U                  Unsafe mode.  No safety checks will be performed.

    -x                  Do not broadcast a transaction.  Only generate and
                        print them to stdout.

    -B BURN_ADDR        Use the given namespace burn address instead of the one
                        obtained from the Blockstack network (requires -i)

    -D DENOMINATION     Denominate the price to pay in the given units
                        (requires -i and -P)

    -C CONSENSUS_HASH   Use the given consensus hash instead of one obtained
                        from the network (requires -i)

    -F FEE_RATE         Use the given transaction fee rate instead of the one
                        obtained from the Bitcoin network (requires -i)

    -G GRACE_PERIOD     Number of blocks in which a name can be renewed after it
                        expires (requires -i)

    -H URL              Use an alternative Blockstack Core node.

    -N PAY2NS_PERIOD    Number of blocks in which a namespace receives the registration
                        and renewal fees after it is created (requires -i)

    -P PRICE            Use the given price to pay for names or namespaces
                        (requires -i)

    -T URL              Use an alternative Blockstack transaction broadcaster.
"""


def usage_banner(prog: str = DEFAULT_PROG) -> str:
    return f"Usage: {prog} [options] command [command arguments]\n{_OPTIONS_HELP}"


def format_help_string(indent: int, limit: int, help_string: str) -> str:
    """Greedily word-wrap ``help_string`` at ``limit`` columns.

    Every output line starts with ``indent`` spaces. Newlines in the input
    are kept as hard breaks, so an empty input line renders as an empty
    output line.
    """
    pad = " " * indent
    out: list[str] = []
    for paragraph in help_string.split("\n"):
        line = pad
        for word in paragraph.split(" "):
            if not word:
                continue
            if line != pad and len(line) + 1 + len(word) > limit:
                out.append(line.rstrip())
                line = pad
            line += word + " "
        out.append(line.rstrip())
    return "\n".join(out) + "\n"


def format_command_help_lines(command: CommandSpec) -> tuple[str, str]:
    """Return the positional usage line and the keyword usage block.

    positional:
        ``  COMMAND ARG_NAME ARG_NAME [OPTIONAL_ARG_NAME]``
    keyword:
        ``  COMMAND --arg_name TYPE``, one argument per line, continuation
        lines aligned under the first ``--``.
    """
    raw = [f"  {command.name}"]
    keyword_lines: list[str] = []
    kw_pad = " " * (len(command.name) + 3)

    for index, spec in enumerate(command.argument_specs):
        if not spec.name:
            raise ValueError(f"BUG: {command.name} argument {index} is missing a name")
        placeholder = spec.name.upper()
        keyword = f"--{spec.name} {spec.semantic_type.upper()}"
        if command.is_optional(index):
            placeholder = f"[{placeholder}]"
            keyword = f"[{keyword}]"
        raw.append(placeholder)
        prefix = f"  {command.name} " if index == 0 else kw_pad
        keyword_lines.append(prefix + keyword)

    if not keyword_lines:
        keyword_lines.append(f"  {command.name}")
    return " ".join(raw), "\n".join(keyword_lines)


def all_commands_list(prog: str = DEFAULT_PROG, *, schema: CommandSchema = SCHEMA) -> str:
    lines = [f"All commands (run '{prog} help COMMAND' for details):"]
    for group, commands in schema.grouped_commands().items():
        lines.append(f"  {group}:")
        wrapped = format_help_string(
            COMMAND_LIST_INDENT,
            COMMAND_LIST_LIMIT,
            " ".join(command.name for command in commands),
        )
        for line in wrapped.splitlines():
            names = line.split()
            if names:
                lines.append(" " * COMMAND_LIST_INDENT + ", ".join(names))
        lines.append("")
    return "\n".join(lines).strip()


def command_usage(
    command_name: str,
    prog: str = DEFAULT_PROG,
    *,
    schema: CommandSchema = SCHEMA,
) -> str:
    command = schema.lookup(command_name)
    if command is None or command_name == "help":
        return all_commands_list(prog, schema=schema)

    raw, keyword = format_command_help_lines(command)
    return (
        f"Command: {command.name}\n"
        "Usage:\n"
        f"{raw}\n"
        f"{keyword}\n"
        "\n"
        f"{format_help_string(2, 78, command.help_text)}"
    )


def full_reference(prog: str = DEFAULT_PROG, *, schema: CommandSchema = SCHEMA) -> str:
    parts = [usage_banner(prog), "\nCommand reference\n"]
    for group, commands in schema.grouped_commands().items():
        parts.append(f"Command group: {group}\n\n")
        for command in commands:
            raw, keyword = format_command_help_lines(command)
            parts.append(f"{raw}\n{keyword}\n{format_help_string(4, 76, command.help_text)}\n")
        parts.append("\n")
    return "".join(parts)


__all__ = [
    "DEFAULT_PROG",
    "all_commands_list",
    "command_usage",
    "format_command_help_lines",
    "format_help_string",
    "full_reference",
    "usage_banner",
]


if __name__ == "__main__":
    print(full_reference(), end="")
