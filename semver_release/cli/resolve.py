"""CLI commands resolving the next release versions."""

import json
from pathlib import Path
from typing import Optional

import click
import yaml

from semver_release.config import ResolutionConfig, load_config
from semver_release.constants import BumpKind, OutcomeStatus, RunMode
from semver_release.cli.utils.logging import logger
from semver_release.versioning import (
    GitRepository,
    SourceControlError,
    VersionBundle,
    VersionOrchestrator,
)
from semver_release.versioning.branch import (
    BranchClassifier,
    Delegated,
    Ignored,
    Unrecognized,
)

OUTPUT_FORMATS = ["properties", "json", "yaml"]


def common_options(cmd):
    """Options shared by every command that reads configuration and the repository."""
    options = [
        click.option(
            "--repo",
            type=click.Path(exists=True, file_okay=False, path_type=Path),
            default=".",
            show_default=True,
            help="Path inside the git working tree.",
        ),
        click.option(
            "--config",
            "config_path",
            type=click.Path(dir_okay=False, path_type=Path),
            envvar="SEMVER_CONFIG",
            help="Configuration file with defaults (INI, section [semver]).",
        ),
        click.option(
            "--branch-version",
            help="Explicit branch version; skips branch-name inspection.",
        ),
        click.option(
            "--branch-conversion-url",
            envvar="SEMVER_BRANCH_CONVERSION_URL",
            help="Service asked for the version of the mainline branch.",
        ),
        click.option(
            "--mainline-branch",
            help="Name of the mainline branch (default: master).",
        ),
    ]
    for option in reversed(options):
        cmd = option(cmd)
    return cmd


def build_config(**options) -> ResolutionConfig:
    config_path = options.pop("config_path", None)
    try:
        return load_config(config_path, **options)
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


def format_bundle(bundle: VersionBundle, output_format: str) -> str:
    """Serialise a bundle for downstream manifest writers."""
    data = bundle.to_dict()
    if output_format == "json":
        return json.dumps(data, indent=2)
    if output_format == "yaml":
        return yaml.safe_dump(data, sort_keys=False).rstrip("\n")
    return "\n".join(f"{key}={value}" for key, value in data.items())


def make_bump_command(kind: BumpKind) -> click.Command:
    """Build the command resolving a release of the given bump kind."""

    @click.command(
        name=kind.value,
        help=(
            f"Resolve the next {kind.name} release from the declared version.\n\n"
            f"The {kind.value} component is incremented and lower components are "
            "reset to 0. Exits with status 1 when the repository state or the "
            "configuration does not allow a release."
        ),
    )
    @click.option(
        "--current-version",
        "-v",
        required=True,
        envvar="SEMVER_CURRENT_VERSION",
        help="Version declared in the project manifest, e.g. 1.2.3-SNAPSHOT.",
    )
    @click.option(
        "--run-mode",
        type=click.Choice([mode.value for mode in RunMode], case_sensitive=False),
        envvar="SEMVER_RUN_MODE",
        help="Release strategy (default: NATIVE).",
    )
    @click.option(
        "--metadata",
        envvar="SEMVER_METADATA",
        help="Suffix appended to the SCM tag, e.g. -solr.",
    )
    @click.option(
        "--check-remote/--no-check-remote",
        "check_remote_tags",
        default=None,
        help="Compare the candidate tag with the remote tags (default: on).",
    )
    @click.option("--username", "scm_username", envvar="SEMVER_SCM_USERNAME")
    @click.option("--password", "scm_password", envvar="SEMVER_SCM_PASSWORD")
    @common_options
    @click.option(
        "--format",
        "-f",
        "output_format",
        type=click.Choice(OUTPUT_FORMATS, case_sensitive=False),
        default="properties",
        help="Output format of the version bundle.",
    )
    @click.option(
        "--out",
        type=click.Path(dir_okay=False, path_type=Path),
        help="Output file to write the version bundle to.",
    )
    @click.option(
        "--create-tag",
        is_flag=True,
        default=False,
        help="Create the SCM tag once the versions are resolved.",
    )
    @click.option(
        "--push",
        is_flag=True,
        default=False,
        help="Push the created tag to the remote (implies --create-tag).",
    )
    @click.pass_context
    def bump(
        ctx,
        current_version: str,
        repo: Path,
        output_format: str,
        out: Optional[Path],
        create_tag: bool,
        push: bool,
        **options,
    ):
        config = build_config(**options)
        try:
            source_control = GitRepository(
                repo,
                remote_name=config.remote_name,
                username=config.scm_username,
                password=config.scm_password,
            )
            outcome = VersionOrchestrator(config, source_control).run(
                current_version, kind
            )
        except SourceControlError as e:
            logger.error(str(e))
            ctx.exit(1)

        if outcome.status is not OutcomeStatus.RESOLVED:
            if outcome.status is OutcomeStatus.FAILED:
                logger.error(f"Semantic versioning is terminated: {outcome.message}")
            ctx.exit(outcome.exit_code)

        output = format_bundle(outcome.bundle, output_format)
        if out:
            try:
                out.write_text(output + "\n", encoding="utf-8")
                logger.info(f"Output written to {out}")
            except OSError as e:
                logger.error(f"Failed to write output file: {e}")
                ctx.exit(1)
        else:
            click.echo(output)

        if create_tag or push:
            try:
                source_control.create_tag(outcome.bundle.scm_tag, push=push)
            except SourceControlError as e:
                logger.error(str(e))
                ctx.exit(1)

    return bump


@click.command(name="branch")
@click.argument("branch_name", required=False)
@common_options
@click.pass_context
def branch(ctx, branch_name: Optional[str], repo: Path, **options):
    """Show how a branch (default: the current one) is classified."""
    config = build_config(**options)
    if branch_name is None and not config.branch_version:
        try:
            branch_name = GitRepository(repo).current_branch()
        except SourceControlError as e:
            logger.error(str(e))
            ctx.exit(1)

    classifier = BranchClassifier(
        branch_conversion_url=config.branch_conversion_url,
        mainline_branch=config.mainline_branch,
        timeout=config.delegation_timeout,
    )
    fragment = classifier.classify(branch_name, config.branch_version)
    if isinstance(fragment, (Ignored, Unrecognized)):
        click.echo(f"{type(fragment).__name__}: {fragment.branch}")
    else:
        click.echo(f"{type(fragment).__name__}: {fragment.value}")
    if isinstance(fragment, Unrecognized) or (
        isinstance(fragment, Delegated) and not fragment.value
    ):
        ctx.exit(1)
