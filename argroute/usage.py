"""
Argroute usage rendering (program-level and command-level help).

The resolution engine never calls into this module; callers render usage when an
outcome fails (see Context.trigger) or when a command's help is requested.

Renderers return rich renderables so callers decide where they are printed.

Program usage
    Usage: PROG <prearg>... <command>

    where <command> is one of:
      NAME    DESCR            (sorted by name)

    available flags:           (only when global flags exist)
      -name metavar   DESCR (default X)

    PROG <command> -h for subcommand help      (while the -h flag is reserved)

  With no registered commands only "Usage of PROG:" and the global flags are shown.

Command usage
    DESCR

    Usage: PROG NAME <slot>...

    Available flags:           (only when the command has flags)
      ...
    Required flags:
      a, b

Palette keys
- program-name, usage-label, section-label, command-name, command-description
- flag-name, metavar, flag-description, default, slot, prearg, required, footer

Customization
- Define a mapping named __styles__ in __main__ to override any palette entry.
- When colorful is False styling is suppressed entirely.
"""
import copy
from collections import defaultdict

from rich.console import Group
from rich.table import Table
from rich.text import Text

from .resolution import declare
from .utils import *


def _palette(colorful):
    styles = defaultdict(str, {
        "program-name": "bold #FF4D94",
        "usage-label": "bold #00E6FF",
        "section-label": "bold #FFFFFF",
        "command-name": "bold #36C5F0",
        "command-description": "#9CA3AF",
        "flag-name": "bold #22C55E",
        "metavar": "bold #FFD600",
        "flag-description": "#9CA3AF",
        "default": "italic #737373",
        "slot": "bold #FFD600",
        "prearg": "bold #FFD600",
        "required": "bold #F97316",
        "footer": "#737373",
    } | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""
    return styler


def _default(flag):
    if flag.zero:
        return None
    if isinstance(flag.default, str):
        return '(default "%s")' % flag.default
    return "(default %s)" % (flag.default,)


def _flags(flags, styler):
    """
    One row per flag (aliases joined), sorted by canonical name.
    """
    table = Table.grid(padding=(0, 3))
    table.add_column(no_wrap=True)
    table.add_column()
    for flag in flags.visit_all():
        names = Text(", ".join("-" + name for name in flag.names), styler("flag-name"))
        if flag.metavar:
            names.append(" ")
            names.append(flag.metavar, styler("metavar"))
        descr = Text(flag.descr or "", styler("flag-description"))
        if default := _default(flag):
            descr.append(" " if flag.descr else "")
            descr.append(default, styler("default"))
        table.add_row(Text.assemble("  ", names), descr)
    return table


def program(registry, flags, prog, /, *, colorful=False):
    """
    Render the program usage for registry and its global flags.
    """
    styler = _palette(colorful)
    name = Text(prog, styler("program-name"))

    if not len(registry):
        renders = [Text.assemble(("Usage of ", styler("usage-label")), name, ":")]
        if len(flags):
            renders.append(_flags(flags, styler))
        return Group(*renders)

    line = Text.assemble(("Usage: ", styler("usage-label")), name)
    for prearg in registry.preargs:
        line.append(" ")
        line.append("<%s>" % prearg.name, styler("prearg"))
    line.append(" <command>")
    renders = [line, Text(""), Text("where <command> is one of:", styler("section-label"))]

    table = Table.grid(padding=(0, 3))
    table.add_column(no_wrap=True)
    table.add_column()
    for each in registry:
        command = registry[each]
        table.add_row(
            Text.assemble("  ", (command.name, styler("command-name"))),
            Text(command.descr, styler("command-description")),
        )
    renders.append(table)

    if len(flags):
        renders += [Text(""), Text("available flags:", styler("section-label")), _flags(flags, styler)]
    if registry.reserve_help_flag:
        renders += [Text(""), Text("%s <command> -h for subcommand help" % prog, styler("footer"))]
    return Group(*renders)


def command(registry, command, prog, /, *, colorful=False):
    """
    Render the usage of one registered command (including its injected help flag).
    """
    styler = _palette(colorful)
    flags, _ = declare(registry, command, copy.copy(command.handler))

    line = Text.assemble(
        ("Usage: ", styler("usage-label")),
        (prog, styler("program-name")),
        " ",
        (command.name, styler("command-name")),
    )
    for each in command.slots or ():
        line.append(" ")
        line.append(str(each), styler("slot"))
    renders = [Text(command.descr, styler("command-description")), Text(""), line]

    if len(flags):
        renders += [Text(""), Text("Available flags:", styler("section-label")), _flags(flags, styler)]
        if command.required:
            renders += [
                Text(""),
                Text("Required flags:", styler("section-label")),
                Text.assemble("  ", (", ".join(sorted(command.required)), styler("required"))),
            ]
    return Group(*renders)


__all__ = (
    "program",
    "command",
)
