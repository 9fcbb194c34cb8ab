"""Travis CI Migration Tool

Migrates repositories from travis-ci.org to travis-ci.com, restores their cron
jobs and updates the GitHub required status checks that reference the old
Travis CI contexts.
"""

__version__ = '0.1.0'


def main() -> None:
    """Run the command line interface."""
    from .cli.main import main as cli_main

    cli_main()


__all__ = ['main', '__version__']
