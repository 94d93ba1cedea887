"""
Command registry built over a click group.

The registry turns each click command of a group into a `CommandSpec` once,
when the registry is built, and from then on answers lookups, hands parsed
invocations back to click for conversion and dispatch, and renders help.
Commands receive the session's persistent instance as `ctx.obj`, so they are
written with `@click.pass_obj`:

    @cli.command(cls=ShellCommand)
    @click.pass_obj
    def count(state):
        state.counter = getattr(state, "counter", 0) + 1
        console.print(f"Count: {state.counter}")

Mapping of click parameters:
    click.Argument (nargs=1, required)     -> required positional
    click.Argument (nargs=1, not required) -> optional positional
    click.Argument (nargs=-1)              -> trailing variadic
    click.Option is_flag                   -> boolean flag
    click.Option type=KEY_VALUE            -> map flag
    click.Option multiple=True             -> array flag
    click.Option int/float types           -> number flag
    click.Option click.Choice              -> allowed values
"""

import asyncio
import inspect
from typing import Any, Final, Optional
import click
from rich.markup import escape
from replkit.commands.base import KeyValueType
from replkit.lib.errors import ArgumentCountError, UnknownCommandError
from replkit.lib.log import LOG
from replkit.models.dataModel import CommandSpec, FlagKind, FlagSpec

DEFAULT_PATH_FLAGS: Final[tuple[str, ...]] = (
    "--file",
    "--output",
    "--input",
    "--path",
    "--dir",
    "--directory",
    "-f",
    "-o",
    "-i",
    "-p",
    "-d",
)

_PLAIN_DEFAULTS: Final[tuple[type, ...]] = (str, int, float, list, tuple, dict)


def _default_of(param: click.Parameter) -> Any:
    """Return a parameter's declared default when it is a plain value."""
    default: Any = param.default
    if callable(default) or not isinstance(default, _PLAIN_DEFAULTS):
        return None
    return default


def flag_build(option: click.Option) -> FlagSpec:
    """Describe a click option as a FlagSpec."""
    long: Optional[str] = next((o for o in option.opts if o.startswith("--")), None)
    short: Optional[str] = next(
        (o for o in option.opts if len(o) == 2 and o[0] == "-" and o[1] != "-"), None
    )
    name: str = long[2:] if long else (option.name or "").replace("_", "-")

    ptype: click.ParamType = option.type
    if option.is_flag:
        kind: FlagKind = FlagKind.BOOLEAN
    elif isinstance(ptype, KeyValueType):
        kind = FlagKind.MAP
    elif option.multiple:
        kind = FlagKind.ARRAY
    elif isinstance(ptype, (click.types.IntParamType, click.types.FloatParamType)):
        kind = FlagKind.NUMBER
    else:
        kind = FlagKind.STRING

    default: Any = _default_of(option)
    if kind == FlagKind.BOOLEAN:
        default = bool(default)
    elif kind == FlagKind.ARRAY and default is not None:
        default = list(default) or None
    elif kind == FlagKind.MAP and default is not None:
        default = dict(default) or None

    choices: Optional[list[str]] = None
    if isinstance(ptype, click.Choice):
        choices = [str(getattr(c, "value", c)) for c in ptype.choices]

    return FlagSpec(
        name=name,
        dest=option.name or name.replace("-", "_"),
        kind=kind,
        alias=short[1] if short else None,
        default=default,
        choices=choices,
        required=option.required,
        is_path=isinstance(ptype, (click.Path, click.File)),
        help=option.help,
    )


def spec_build(name: str, command: click.Command) -> CommandSpec:
    """Describe a click command as a CommandSpec.

    Free-text mode comes from `ShellCommand(free_text=...)` when declared;
    otherwise a command qualifies when its only parameter is one required
    positional.
    """
    required: list[str] = []
    optional: list[str] = []
    variadic: Optional[str] = None
    flags: list[FlagSpec] = []

    for param in command.params:
        if not param.expose_value or not param.name:
            continue
        if isinstance(param, click.Argument):
            if param.nargs == -1:
                variadic = param.name
            elif param.required:
                required.append(param.name)
            else:
                optional.append(param.name)
        elif isinstance(param, click.Option):
            flags.append(flag_build(param))

    subcommands: list[str] = []
    if isinstance(command, click.Group):
        subcommands = sorted(command.commands)
        variadic = variadic or "args"

    free_text: Optional[bool] = getattr(command, "free_text", None)
    if free_text is None:
        free_text = (
            len(required) == 1
            and not optional
            and variadic is None
            and not flags
            and not subcommands
        )

    path_flags: Optional[list[str]] = getattr(command, "path_flags", None)
    if path_flags is None:
        path_flags = list(DEFAULT_PATH_FLAGS)
        for flag in flags:
            if flag.is_path:
                path_flags.extend(t for t in (flag.long, flag.short) if t)

    return CommandSpec(
        name=name,
        required=required,
        optional=optional,
        variadic=variadic,
        flags=flags,
        free_text=free_text,
        path_flags=sorted(set(path_flags)),
        subcommands=subcommands,
        help=command.get_short_help_str(limit=60) or "",
        description=command.help or "",
    )


class CommandRegistry:
    """Lookup table of command specs over a click group.

    Attributes:
        group: The click group commands are drawn from
        name: Application name shown in banners
    """

    def __init__(self, group: click.Group, name: Optional[str] = None) -> None:
        self.group: click.Group = group
        self.name: str = name or group.name or "replkit"
        self._commands: dict[str, click.Command] = dict(group.commands)
        self._specs: dict[str, CommandSpec] = {
            cmd_name: spec_build(cmd_name, command)
            for cmd_name, command in self._commands.items()
        }
        LOG(f"Registry '{self.name}' built with {len(self._specs)} commands")

    def __contains__(self, name: object) -> bool:
        return name in self._specs

    def commands_list(self) -> list[CommandSpec]:
        return [self._specs[name] for name in sorted(self._specs)]

    def names(self) -> list[str]:
        return sorted(self._specs)

    def lookup(self, name: str) -> Optional[CommandSpec]:
        return self._specs.get(name)

    def arguments_check(self, spec: CommandSpec, positionals: list[str]) -> None:
        """Check that positionals fit the command's arguments.

        Raises:
            ArgumentCountError: Missing required or surplus positionals
        """
        missing: list[str] = spec.required[len(positionals) :]
        if missing:
            raise ArgumentCountError(f"Missing argument '{missing[0].upper()}'.")

        if spec.variadic:
            return
        rest: list[str] = positionals[len(spec.required) + len(spec.optional) :]
        if rest:
            plural: str = "s" if len(rest) > 1 else ""
            raise ArgumentCountError(
                f"Got unexpected extra argument{plural} ({' '.join(rest)})"
            )

    def arguments_build(
        self, spec: CommandSpec, positionals: list[str], flags: dict[str, Any]
    ) -> tuple[list[str], dict[str, Any]]:
        """Render a parse result back into click's argument list.

        Flags still at their declared default are left out so click applies
        its own default, envvar or default factory. A boolean switched off
        that has no `--no-` form in click is returned as a context override.

        Returns:
            The argument list and the parameter overrides
        """
        options: dict[str, click.Parameter] = {
            p.name: p for p in self._commands[spec.name].params if p.name
        }
        args: list[str] = []
        overrides: dict[str, Any] = {}
        for flag in spec.flags:
            if flag.name not in flags or flags[flag.name] == flag.default:
                continue
            option: click.Parameter = options[flag.dest]
            value: Any = flags[flag.name]
            if flag.kind == FlagKind.BOOLEAN and not value and not option.secondary_opts:
                overrides[flag.dest] = False
                continue
            args += option_args(option, flag, value)
        if positionals:
            args += ["--", *positionals]
        return args, overrides

    def invoke(
        self,
        instance: Any,
        name: str,
        positionals: list[str],
        flags: dict[str, Any],
    ) -> Any:
        """Run a command through click with `instance` as the context object.

        Values go through click's own parameter processing, so they reach
        the callback converted exactly as on the command line. Groups get
        the raw tokens and parse their own and their subcommands' options.
        Coroutine callbacks are run to completion before returning.

        Raises:
            UnknownCommandError: If the name is not registered
            ArgumentCountError: If positionals do not fit
            click.UsageError: If click rejects a value
        """
        spec: Optional[CommandSpec] = self.lookup(name)
        if spec is None:
            raise UnknownCommandError(name)
        command: click.Command = self._commands[name]

        overrides: dict[str, Any] = {}
        if spec.subcommands:
            args: list[str] = list(positionals)
        else:
            self.arguments_check(spec, positionals)
            args, overrides = self.arguments_build(spec, positionals, flags)

        with command.make_context(name, args, obj=instance) as ctx:
            ctx.params.update(overrides)
            result: Any = command.invoke(ctx)

        if inspect.iscoroutine(result):
            result = asyncio.run(result)
        return result

    def help_render(self, name: Optional[str] = None, marker: str = "/") -> str:
        """Render help for one command, or the command list when name is None
        or unknown. Returns Rich markup."""
        spec: Optional[CommandSpec] = self.lookup(name) if name else None
        if spec is None:
            lines: list[str] = [
                f"[bold green]Available commands (prefix with {escape(marker)}):[/bold green]"
            ]
            for item in self.commands_list():
                label: str = escape(f"{marker}{item.name}".ljust(20))
                lines.append(f"  [cyan]{label}[/cyan] {escape(item.help)}")
            return "\n".join(lines)

        usage: list[str] = [f"{marker}{spec.name}"]
        usage += [p.upper() for p in spec.required]
        usage += [f"[{p.upper()}]" for p in spec.optional]
        if spec.variadic:
            usage.append(f"[{spec.variadic.upper()}...]")
        if spec.flags:
            usage.append("[OPTIONS]")

        lines = []
        if spec.description:
            lines += [spec.description.strip(), ""]
        lines.append(
            f"[bold yellow]Usage:[/bold yellow] [green]{escape(' '.join(usage))}[/green]"
        )
        if spec.free_text:
            lines.append("  (everything after the command name is passed as one argument)")
        if spec.subcommands:
            lines.append(
                f"[bold yellow]Subcommands:[/bold yellow] {escape(', '.join(spec.subcommands))}"
            )
        if spec.flags:
            lines.append("[bold yellow]Options:[/bold yellow]")
            for flag in spec.flags:
                label = ", ".join(t for t in (flag.long, flag.short) if t)
                notes: list[str] = [flag.kind.value]
                if flag.choices:
                    notes.append(f"one of: {', '.join(flag.choices)}")
                if flag.default not in (None, False):
                    notes.append(f"default: {flag.default}")
                if flag.required:
                    notes.append("required")
                lines.append(
                    f"  [cyan]{escape(label.ljust(22))}[/cyan] {escape(flag.help or '')} "
                    f"[dim]{escape('(' + '; '.join(notes) + ')')}[/dim]"
                )
        return "\n".join(lines)


def option_args(option: click.Parameter, flag: FlagSpec, value: Any) -> list[str]:
    """Render one parsed flag value as click command-line tokens."""
    opt: str = next((o for o in option.opts if o.startswith("--")), option.opts[0])
    if flag.kind == FlagKind.BOOLEAN:
        return [opt] if value else [option.secondary_opts[0]]

    if flag.kind == FlagKind.ARRAY:
        values: list[Any] = list(value)
    elif flag.kind == FlagKind.MAP:
        values = [f"{key}:{item}" for key, item in value.items()]
    else:
        values = [value]

    args: list[str] = []
    for item in values:
        if opt.startswith("--"):
            args.append(f"{opt}={item}")
        else:
            args += [opt, str(item)]
    return args
