# proinfer/cli/main.py
import argparse

from proinfer.cli import db, filters, infer, logging as logging_cli


def main(argv=None):

    parser = argparse.ArgumentParser(prog="proinfer", description="protein inference toolkit")
    subparsers = parser.add_subparsers(dest="command", required=True)

    db_parser = subparsers.add_parser("db", help="Database operations")
    db_subparsers = db_parser.add_subparsers(dest="subcommand", required=True)
    db.register_subcommands(db_subparsers)

    filters_parser = subparsers.add_parser("filters", help="Inspect and check filters")
    filters_subparsers = filters_parser.add_subparsers(dest="subcommand", required=True)
    filters.register_subcommands(filters_subparsers)

    logging_parser = subparsers.add_parser("logging", help="Logging utilities")
    logging_subparsers = logging_parser.add_subparsers(dest="subcommand", required=True)
    logging_cli.register_subcommands(logging_subparsers)

    infer_parser = subparsers.add_parser("infer", help="Run the protein inference")
    infer.register_arguments(infer_parser)

    args = parser.parse_args(argv)

    if args.command == "db":
        return db.dispatch(args)
    elif args.command == "filters":
        return filters.dispatch(args)
    elif args.command == "logging":
        return logging_cli.dispatch(args)
    elif args.command == "infer":
        return infer.dispatch(args)
