"""CLI adapter for ``lib_getconfig`` built on ``lib_cli_exit_tools``.

Purpose
-------
Let operators check what a key resolves to, which files are loaded, and where
a named file is found, without writing Python code.

Contents
--------
* :data:`CLICK_CONTEXT_SETTINGS` – shared Click settings ensuring ``-h`` works.
* :func:`cli` – root command wiring traceback handling into
  ``lib_cli_exit_tools``.
* :func:`cli_info` – prints distribution metadata.
* :func:`cli_get` – resolves keys and prints them as JSON.
* :func:`cli_files` – lists discovered files in load order.
* :func:`cli_find` – locates a named file.
* :func:`main` – entry point used by ``console_scripts`` registration.

System Role
-----------
Outermost layer: commands construct a :class:`lib_getconfig.core.ConfigResolver`
and never reach into adapters. ``lib_cli_exit_tools`` centralises the exit code
strategy.
"""

from __future__ import annotations

import json
import sys
from importlib import metadata
from pathlib import Path
from typing import Any, Callable, Final, Optional, Sequence

import lib_cli_exit_tools
import rich_click as click

from .adapters.env.default import DEFAULT_ENV_PREFIX
from .core import ConfigResolver

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
_TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000


def _resolve_version() -> str:
    """Return the installed package version, ``"0.0.0"`` for uninstalled trees."""

    try:
        return metadata.version("lib_getconfig")
    except metadata.PackageNotFoundError:
        return "0.0.0"


def _resolver_options(command: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the ``--file``/``--dir``/``--env-prefix`` options shared by all lookups."""

    command = click.option(
        "--env-prefix",
        default=DEFAULT_ENV_PREFIX,
        show_default=True,
        help="Prefix of the *_INI_FILE/*_ETC_DIR/*_INI_DIR override variables",
    )(command)
    command = click.option(
        "--dir",
        "directory",
        type=click.Path(path_type=Path, file_okay=False, dir_okay=True),
        default=None,
        help="Directory scanned for additional ini/env/yaml/json files",
    )(command)
    command = click.option(
        "--file",
        "file",
        type=click.Path(path_type=Path, dir_okay=False),
        default=None,
        help="Primary configuration file",
    )(command)
    return command


@click.group(
    help="Layered configuration resolver (environment first, then files)",
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=False,
)
@click.version_option(
    version=_resolve_version(),
    prog_name="lib_getconfig",
    message="lib_getconfig version %(version)s",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool) -> None:
    """Root command storing the traceback preference for all subcommands.

    Side Effects
        Mutates ``lib_cli_exit_tools.config.traceback`` and
        ``lib_cli_exit_tools.config.traceback_force_color``.
    """

    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print basic distribution metadata so users can confirm installation."""

    try:
        meta = metadata.metadata("lib_getconfig")
    except metadata.PackageNotFoundError:
        click.echo("lib_getconfig (metadata unavailable)")
        return
    click.echo(f"Info for {meta.get('Name', 'lib_getconfig')}:")
    click.echo(f"  Version         : {meta.get('Version', _resolve_version())}")
    click.echo(f"  Requires-Python : {meta.get('Requires-Python', '>=3.10')}")
    summary = meta.get("Summary")
    if summary:
        click.echo(f"  Summary         : {summary}")


@cli.command("get", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("keys", nargs=-1, required=True)
@_resolver_options
@click.option(
    "--provenance/--no-provenance",
    default=False,
    help="Include the source (env or file path) of each value",
)
@click.option(
    "--indent",
    type=int,
    default=None,
    help="Pretty-print JSON output with the provided indent size",
)
def cli_get(
    keys: Sequence[str],
    file: Optional[Path],
    directory: Optional[Path],
    env_prefix: str,
    provenance: bool,
    indent: Optional[int],
) -> None:
    """Resolve KEYS and print a JSON object; absent keys print as ``null``."""

    resolver = ConfigResolver(file, directory, env_prefix=env_prefix)
    values = {key: resolver.get(key) for key in keys}
    if provenance:
        payload: dict[str, Any] = {"values": values, "provenance": {key: resolver.origin(key) for key in keys}}
        click.echo(json.dumps(payload, indent=indent, ensure_ascii=False))
        return
    click.echo(json.dumps(values, indent=indent, ensure_ascii=False))


@cli.command("files", context_settings=CLICK_CONTEXT_SETTINGS)
@_resolver_options
def cli_files(file: Optional[Path], directory: Optional[Path], env_prefix: str) -> None:
    """Print the discovered configuration files in load order."""

    resolver = ConfigResolver(file, directory, env_prefix=env_prefix)
    payload = [{"path": candidate.path, "format": candidate.format} for candidate in resolver.files]
    click.echo(json.dumps(payload, indent=2))


@cli.command("find", context_settings=CLICK_CONTEXT_SETTINGS)
@click.argument("name")
@_resolver_options
def cli_find(name: str, file: Optional[Path], directory: Optional[Path], env_prefix: str) -> None:
    """Print the path of NAME in the configuration directories (``null`` when missing)."""

    resolver = ConfigResolver(file, directory, env_prefix=env_prefix)
    click.echo(json.dumps(resolver.find_file(name)))


def main(argv: Optional[Sequence[str]] = None, *, restore_traceback: bool = True) -> int:
    """Execute the CLI with shared exit handling and return the exit code."""

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        try:
            return lib_cli_exit_tools.run_cli(
                cli,
                argv=list(argv) if argv is not None else None,
                prog_name="lib_getconfig",
            )
        except BaseException as exc:  # noqa: BLE001 - funnel through shared printers
            lib_cli_exit_tools.print_exception_message(
                trace_back=lib_cli_exit_tools.config.traceback,
                length_limit=(
                    _TRACEBACK_VERBOSE_LIMIT if lib_cli_exit_tools.config.traceback else _TRACEBACK_SUMMARY_LIMIT
                ),
            )
            return lib_cli_exit_tools.get_system_exit_code(exc)
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


if __name__ == "__main__":  # pragma: no cover - exercised via console entry point
    raise SystemExit(main(sys.argv[1:]))
