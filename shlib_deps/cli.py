"""CLI entry point: shlib-deps.

Usage:
    shlib-deps debian/tmp/usr/bin                      # libc6 (>= 2.34), libfoo1
    shlib-deps -f multiline debian/tmp                 # one dependency per line
    shlib-deps -f json -o deps.json --tee build/app    # JSON to file and stdout
"""

from __future__ import annotations

import json
import sys

import click

from shlib_deps import __version__
from shlib_deps.api import DependencyAnalyzer
from shlib_deps.core.config import Settings
from shlib_deps.core.logging import setup_logging
from shlib_deps.exceptions import ShlibDepsError
from shlib_deps.models.dependency import PackageDependency

FORMATS = ("oneline", "multiline", "json")


def format_dependencies(dependencies: list[PackageDependency], fmt: str) -> str:
    """Render resolved dependencies as Depends-style text or JSON."""
    if fmt == "oneline":
        return ", ".join(str(d) for d in dependencies)
    if fmt == "multiline":
        return "\n".join(str(d) for d in dependencies)
    if fmt == "json":
        return json.dumps([d.as_json() for d in dependencies])
    raise ValueError(f"Invalid format: {fmt!r}")


def _write_output(text: str, output: str | None, tee: bool) -> None:
    if output:
        with open(output, "w", encoding="utf-8") as fh:
            if text:
                fh.write(text)
        if tee and text:
            click.echo(text)
    elif text:
        click.echo(text)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("paths", nargs=-1, type=click.Path(exists=True, path_type=str))
@click.option(
    "-f",
    "--format",
    "fmt",
    type=click.Choice(FORMATS),
    default="oneline",
    show_default=True,
    help="Output format",
)
@click.option("-o", "--output", default=None, help="Write output file instead of standard output")
@click.option("--tee", is_flag=True, help="When --output is specified, also write to standard output")
@click.option("--arch", default=None, help="Target architecture (default: DEB_HOST_ARCH / dpkg)")
@click.option("--symbols-dir", default=None, help="Directory holding dpkg *.symbols files")
@click.option("--verbose", is_flag=True, help="Show verbose output")
@click.version_option(__version__, prog_name="shlib-deps")
@click.pass_context
def main(
    ctx: click.Context,
    paths: tuple[str, ...],
    fmt: str,
    output: str | None,
    tee: bool,
    arch: str | None,
    symbols_dir: str | None,
    verbose: bool,
) -> None:
    """Compute Debian package dependencies of ELF files.

    PATHS may be ELF files or directories, which are scanned recursively
    for executable files.
    """
    if not paths:
        click.echo(ctx.get_help(), err=True)
        sys.exit(1)

    setup_logging(verbose)

    settings = Settings.from_env(architecture=arch, symbols_dir=symbols_dir)
    analyzer = DependencyAnalyzer(settings)
    try:
        analyzer.scan(*paths)
        dependencies = analyzer.resolve()
    except ShlibDepsError as e:
        click.echo(str(e), err=True)
        sys.exit(1)

    try:
        _write_output(format_dependencies(dependencies, fmt), output, tee)
    except OSError as e:
        click.echo(f"Error writing {output}: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
