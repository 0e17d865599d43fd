"""semver-release CLI"""

import click

from semver_release import __version__
from semver_release.cli.resolve import branch, make_bump_command
from semver_release.constants import BumpKind

from .debug import add_debug_option


@click.group()
@click.version_option(__version__, prog_name="semver-release")
@click.pass_context
def cli(ctx):
    """
    Determine the next semantic version, SCM tag and development version
    of a project from its declared version, branch and run mode.
    """
    ctx.ensure_object(dict)


for kind in (BumpKind.MAJOR, BumpKind.MINOR, BumpKind.PATCH):
    cli.add_command(add_debug_option(make_bump_command(kind)))
cli.add_command(add_debug_option(branch))

add_debug_option(cli)

if __name__ == "__main__":
    cli(obj={})
