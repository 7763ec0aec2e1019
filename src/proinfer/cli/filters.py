"""``proinfer filters``: list the available filters and check definitions."""

from rich.console import Console
from rich.table import Table

from proinfer.filter import (
    FilterLevel,
    ScoreFilterFamily,
    available_comparators,
    filter_to_string,
    parse_filter_expressions,
    registered_filters,
)
from proinfer.logging import get_logger


def register_subcommands(subparsers):
    list_parser = subparsers.add_parser("list", help="List the available filters")
    list_parser.add_argument(
        "--level",
        choices=[level.value for level in FilterLevel],
        help="Only list filters of this level",
    )

    check_parser = subparsers.add_parser(
        "check", help="Parse filter definitions and report problems"
    )
    check_parser.add_argument(
        "expressions",
        nargs="+",
        metavar="EXPR",
        help='Filter definition, e.g. "charge_filter >= 2"',
    )


def dispatch(args, console: Console | None = None):
    """Returns the process exit code."""

    if console is None:
        console = Console()

    if args.subcommand == "list":
        level = FilterLevel(args.level) if args.level else None
        _render_filter_list(level, console)
        return 0
    elif args.subcommand == "check":
        return _check_expressions(args.expressions, console)

    get_logger(__file__).error("No handler for subcommand: %s", args.subcommand)
    return 1


def _render_filter_list(level: FilterLevel | None, console: Console) -> None:
    table = Table(title="Available filters")
    table.add_column("Short name", style="bold cyan")
    table.add_column("Name")
    table.add_column("Level", style="magenta")
    table.add_column("Type", style="green")
    table.add_column("Comparators", style="yellow")

    for registered in registered_filters(level):
        table.add_row(
            registered.short_name,
            registered.name,
            registered.level.value,
            registered.filter_type.name,
            " ".join(c.token for c in registered.filter_type.comparators),
        )
    for family in ScoreFilterFamily:
        if level is not None and family.level is not level:
            continue
        table.add_row(
            f"{family.prefix}<score>",
            family.name.replace("_", " "),
            family.level.value,
            "numerical",
            " ".join(c.token for c in available_comparators(family.prefix + "score")),
        )
    console.print(table)


def _check_expressions(expressions, console: Console) -> int:
    result = parse_filter_expressions(expressions)

    table = Table(title="Filter definitions")
    table.add_column("Definition", style="bold cyan")
    table.add_column("Result")
    parsed = iter(result.filters)
    for text in expressions:
        if text in result.errors:
            table.add_row(text, f"[red]{result.errors[text]}[/red]")
        else:
            table.add_row(text, f"[green]{filter_to_string(next(parsed))}[/green]")
    console.print(table)
    return 0 if result.ok else 1
