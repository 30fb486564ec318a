"""
geostack — CLI entrypoint.

Usage:
    geostack --help
    geostack install /gpfs/data1/cmongp1/$USER /gpfs/data1/cmongp1/GEOGLAM/Code
    geostack detect
    geostack manifest --python-version 3.12.9 --gdal-version 3.11.0
    geostack verify /gpfs/data1/cmongp1/$USER
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from geostack import __version__
from geostack.core.observability.logging_config import (
    ENV_FILE,
    ENV_FILE_LEVEL,
    resolve_level,
    setup_logging,
)


@click.group()
@click.version_option(version=__version__, prog_name="geostack")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to geostack.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """geostack — provision a pinned geospatial Python environment."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet, environ=os.environ),
        log_file=os.environ.get(ENV_FILE),
        log_file_level=os.environ.get(ENV_FILE_LEVEL),
    )


# ── Install ─────────────────────────────────────────────────────


def _prompt_paths(
    install_base: str | None,
    work_dir: str | None,
    *,
    err: bool = False,
) -> tuple[str, str]:
    """Ask for whichever path was not given on the command line.

    With ``err`` set, the banner and prompts go to stderr.
    """
    if install_base is None or work_dir is None:
        for line in (
            "============================================",
            "   Python Geospatial Environment Installer",
            "   HPC/Cluster Version",
            "============================================",
            "",
            "Example paths:",
            "  Data partition: /gpfs/data1/cmongp1/$USER",
            "  Working directory: /gpfs/data1/cmongp1/GEOGLAM/Code/Code/preprocess",
            "",
        ):
            click.echo(line, err=err)
    if install_base is None:
        install_base = click.prompt(
            "Enter your data partition path", default="", show_default=False, err=err,
        )
    if work_dir is None:
        work_dir = click.prompt(
            "Enter your working directory path", default="", show_default=False, err=err,
        )
    return install_base.strip(), work_dir.strip()


def _print_install_summary(result, quiet: bool) -> None:
    run = result.run
    paths = result.paths
    ctx = run.context

    click.echo()
    click.secho("🔍 Detected:", fg="cyan", bold=True)
    click.echo(
        f"   Python {ctx.runtime_version}  ({ctx.runtime_source.value}"
        + (f": {ctx.runtime_module}" if ctx.runtime_module else "")
        + f")  → {ctx.runtime_command}"
    )
    if ctx.native_library_version:
        click.echo(
            f"   GDAL {ctx.native_library_version}  ({ctx.lib_source.value}"
            + (f": {ctx.lib_module}" if ctx.lib_module else "")
            + ")"
        )
    else:
        click.echo("   GDAL not detected (default pin used)")

    report = run.report
    click.echo()
    click.secho(f"📦 Installed with {report.tool}:", fg="cyan", bold=True)
    click.echo(f"   Manifest: {len(run.manifest)} packages → {paths.requirements_file}")
    if report.bulk_ok:
        click.secho("   ✓ Bulk install succeeded", fg="green")
    else:
        click.secho("   ✗ Bulk install failed, critical packages installed individually",
                    fg="yellow")
    for name in report.failed:
        click.secho(f"   ✗ {name}", fg="red")

    verification = run.verification
    click.echo()
    click.secho("🧪 Verification:", fg="cyan", bold=True)
    if not quiet:
        for name in verification.succeeded:
            click.secho(f"   ✓ {name}", fg="green")
    for name in verification.failed:
        click.secho(f"   ✗ {name}", fg="red")
    if verification.in_home:
        click.secho("   ⚠️  Python appears to be in home directory", fg="yellow")
    if verification.failed:
        click.echo("   You can try installing them manually with:")
        click.echo(f"     uv pip install {' '.join(verification.failed)}")

    from geostack.core.services.provision.execution.report import activation_commands

    click.echo()
    if verification.all_ok:
        click.secho("✅ INSTALLATION COMPLETE!", fg="green", bold=True)
    else:
        click.secho("⚠️  INSTALLATION COMPLETE WITH ISSUES", fg="yellow", bold=True)
    click.echo()
    click.echo("To activate your environment, run these commands:")
    for line in activation_commands(ctx, paths):
        click.echo(f"  {line}")
    click.echo()
    click.echo("Then navigate to your working directory:")
    click.echo(f"  cd {paths.work_dir}")
    if run.summary_path:
        click.echo()
        click.secho(f"   💾 Installation info saved to {run.summary_path}", fg="cyan")
    click.echo()


@cli.command()
@click.argument("install_base", required=False)
@click.argument("work_dir", required=False)
@click.option("--env-name", default=None, help="Environment directory name (default: geo-stack).")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation.")
@click.option(
    "--config", "-c", "config_path", type=click.Path(dir_okay=False), default=None,
    help="Path to geostack.yml (overrides the global option).",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def install(
    ctx: click.Context,
    install_base: str | None,
    work_dir: str | None,
    env_name: str | None,
    yes: bool,
    as_json: bool,
    config_path: str | None,
) -> None:
    """Create the environment and install the pinned stack.

    INSTALL_BASE is the data partition that receives the environment;
    WORK_DIR is where you will run your code. Both are prompted for
    when omitted. ``$USER`` in either path is replaced by your login.

    Examples:

        geostack install /gpfs/data1/cmongp1/$USER ~/code

        geostack install --yes --env-name geo-dev /scratch/$USER .
    """
    from geostack.core.models.config import DEFAULT_ENV_NAME, expand_user_token
    from geostack.core.use_cases.install import run_install

    # With --json, stdout carries the JSON document only
    err = as_json

    install_base, work_dir = _prompt_paths(install_base, work_dir, err=err)
    install_base = expand_user_token(install_base)
    work_dir = expand_user_token(work_dir)

    for line in (
        "",
        "============================================",
        "Installation Configuration:",
        "============================================",
        f"Install location: {install_base}",
        f"Working directory: {work_dir}",
        f"Environment name: {env_name or DEFAULT_ENV_NAME}",
        "============================================",
        "",
    ):
        click.echo(line, err=err)

    if not install_base or not work_dir:
        click.secho("❌ Installation paths not set!", fg="red", err=err)
        sys.exit(1)

    if not yes and not click.confirm("Continue with installation?", default=False, err=err):
        click.echo("Installation cancelled.", err=err)
        return

    result = run_install(
        Path(install_base),
        Path(work_dir),
        env_name=env_name,
        config_path=Path(config_path) if config_path else ctx.obj.get("config_path"),
        on_step=None if as_json else (lambda label: click.echo(f"→ {label}")),
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    _print_install_summary(result, quiet=ctx.obj.get("quiet", False))


# ── Detect ──────────────────────────────────────────────────────


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def detect(ctx: click.Context, as_json: bool) -> None:
    """Show which Python and GDAL an install would use."""
    from geostack.core.use_cases.detect import run_detect

    result = run_detect(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.error is None else 1)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    context = result.context
    assert context is not None  # guaranteed after error check above

    click.secho("\n🔍 Resolution", fg="cyan", bold=True)
    click.echo(f"   Module system: {'yes' if context.module_system else 'no'}")
    click.echo(
        f"   Python: {context.runtime_version} ({context.runtime_source.value})"
        f"  → {context.runtime_command}"
    )
    if context.runtime_module:
        click.echo(f"     module: {context.runtime_module}")
    gdal = context.native_library_version
    click.echo(f"   GDAL: {gdal or 'not detected'} ({context.lib_source.value})")
    if context.lib_module:
        click.echo(f"     module: {context.lib_module}")
    click.echo()
    click.secho("   Pins:", fg="white", bold=True)
    click.echo(f"     gdal=={result.gdal_pin}")
    click.echo(f"     numpy=={result.numpy_pin}")
    click.echo()


# ── Manifest ────────────────────────────────────────────────────


def _version_option(ctx: click.Context, param: click.Parameter, value: str | None):
    if value is None:
        return None
    from geostack.core.models.resolution import SemVer

    parsed = SemVer.parse(value)
    if parsed is None:
        raise click.BadParameter(f"not a version: {value!r}")
    return parsed


@cli.command()
@click.option(
    "--python-version", required=True, callback=_version_option,
    help="Runtime version the environment will use, e.g. 3.12.9.",
)
@click.option(
    "--gdal-version", default=None, callback=_version_option,
    help="Native GDAL version (default pin when omitted).",
)
@click.option(
    "--output", "-o", type=click.Path(dir_okay=False), default=None,
    help="Write to this file instead of stdout.",
)
@click.pass_context
def manifest(ctx: click.Context, python_version, gdal_version, output: str | None) -> None:
    """Render requirements.txt without installing anything."""
    from geostack.core.config.loader import ConfigError, load_config
    from geostack.core.models.resolution import ResolutionContext
    from geostack.core.services.provision.domain.version import check_version_floor
    from geostack.core.services.provision.errors import ManifestError
    from geostack.core.services.provision.resolver.manifest import (
        generate_manifest,
        render_manifest,
        write_manifest,
    )

    try:
        config = load_config(ctx.obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    check = check_version_floor(python_version)
    if not check["valid"]:
        click.secho(f"❌ {check['message']}", fg="red", err=True)
        sys.exit(1)

    context = ResolutionContext(
        runtime_command=f"python{python_version.major}.{python_version.minor}",
        runtime_version=python_version,
        native_library_version=gdal_version,
    )
    generated = generate_manifest(context, gdal_default=config.gdal_default_version)

    if output is None:
        click.echo(render_manifest(generated), nl=False)
        return

    try:
        write_manifest(generated, Path(output))
    except ManifestError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)
    click.secho(f"✅ {len(generated)} packages written to {output}", fg="green")


# ── Verify ──────────────────────────────────────────────────────


@cli.command()
@click.argument("install_base")
@click.option("--env-name", default=None, help="Environment directory name.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def verify(ctx: click.Context, install_base: str, env_name: str | None, as_json: bool) -> None:
    """Re-check critical imports in an existing environment."""
    from geostack.core.models.config import expand_user_token
    from geostack.core.use_cases.verify import run_verify

    result = run_verify(
        Path(expand_user_token(install_base)),
        env_name=env_name,
        config_path=ctx.obj.get("config_path"),
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.error is None else 1)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    report = result.report
    assert report is not None

    click.secho(f"\n🧪 Verification: {report.python_path}", fg="cyan", bold=True)
    for name in report.succeeded:
        click.secho(f"   ✓ {name} imported successfully", fg="green")
    for name in report.failed:
        click.secho(f"   ✗ {name} import failed", fg="red")
    if report.in_home:
        click.secho("   ⚠️  Python appears to be in home directory", fg="yellow")
    else:
        click.echo("   ✓ Python location correct (not in home)")
    click.echo()
    if report.all_ok:
        click.secho("✅ All critical packages verified!", fg="green", bold=True)
    else:
        click.secho(f"⚠️  Failed packages: {', '.join(report.failed)}", fg="yellow")
    click.echo()


if __name__ == "__main__":
    cli()
