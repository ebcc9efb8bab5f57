"""CLI entry point for fittrack."""

import logging

import click

from . import __version__
from .commands import analytics, delete, init, programs, seed, serve
from .config import settings


@click.group()
@click.version_option(version=__version__, prog_name="fittrack")
@click.option("--verbose", "-v", is_flag=True, help="Log debug output")
def main(verbose: bool):
    """fittrack: training log with cascade deletes and analytics.

    Example usage:

        # Initialize the project
        fittrack init

        # Load demo data
        fittrack seed

        # See what deleting a week would remove, then delete it
        fittrack delete week <program-id> <week-id>

        # Training statistics
        fittrack analytics summary --period month
        fittrack analytics month
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# Register commands
main.add_command(init)
main.add_command(seed)
main.add_command(programs)
main.add_command(delete)
main.add_command(analytics)
main.add_command(serve)


def run():
    """Run the CLI."""
    main()


if __name__ == "__main__":
    run()
