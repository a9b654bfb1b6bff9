"""Main CLI entry point."""

import click

from bizsplit.config import DB_PATH_ENV
from bizsplit.logging_config import setup_logging
from bizsplit.storage.factories import create_sqlite_store

# Import and register all commands at module level
from bizsplit.cli.commands import add, report, settings, setup


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help=f"Path to database file (overrides {DB_PATH_ENV} environment variable)",
    envvar=DB_PATH_ENV,
)
@click.pass_context
def cli(ctx, db_path: str | None):
    """bizsplit - keep business and personal money apart.

    Record what comes in and goes out of the company and see how much must
    be set aside for taxes, reserves, growth and fixed costs before you pay
    yourself.
    """
    ctx.ensure_object(dict)
    setup_logging()

    # Open the store only when actually running a command (not when showing help)
    if ctx.invoked_subcommand is not None:
        store = create_sqlite_store(database_path=db_path)
        store.connect()
        store.initialize_schema()
        ctx.obj["store"] = store
        ctx.call_on_close(store.disconnect)


# Register all commands
setup.register_commands(cli)
add.register_commands(cli)
report.register_commands(cli)
settings.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
