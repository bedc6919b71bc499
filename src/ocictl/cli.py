"""
ocictl CLI

Implements the command-line surface of the OCI artifact client:
- repo ls: List repositories under a registry with client-side filters
- manifest fetch: Fetch a manifest and optionally export it to a file
- annotations resolve: Merge manifest annotations from flags or a file
"""
from __future__ import annotations

import logging
from typing import List, Optional

import typer

from .cli_context import CLIContext
from .display import DEFAULT_PAGE_SIZE
from .models import Reference
from .operations import Operations, OpsConfig, run_and_exit
from .operations.printers import print_annotations, print_manifest, print_repositories
from .options import PackerOptions, RepositoryListOptions
from .settings import Settings

app = typer.Typer(name="ocictl", help="OCI artifact client")
repo_app = typer.Typer(help="Repository operations")
manifest_app = typer.Typer(help="Manifest operations")
annotations_app = typer.Typer(help="Manifest annotation helpers")

app.add_typer(repo_app, name="repo")
app.add_typer(manifest_app, name="manifest")
app.add_typer(annotations_app, name="annotations")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

def _configure_logging(debug: bool, verbose: bool) -> None:
    """Set the root log level from the common flags."""
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)

def _context(insecure: bool, plain_http: bool, username: Optional[str],
             password: Optional[str]) -> CLIContext:
    # Unset boolean flags must not override the environment
    return CLIContext.from_env(
        insecure=insecure or None,
        plain_http=plain_http or None,
        username=username,
        password=password,
    )

@app.callback()
def main_callback(
    debug: bool = typer.Option(False, "--debug", "-d", help="Output debug logs"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Output info logs"),
) -> None:
    """OCI artifact client."""
    _configure_logging(debug, verbose)

def list_repositories(
    registry: str = typer.Argument(..., help="Registry hostname, e.g. localhost:5000"),
    first: int = typer.Option(1000, "--first", help="the first X records"),
    skip: int = typer.Option(0, "--skip", help="skip the first X records"),
    startwith: str = typer.Option("", "--startwith", help="records start with X"),
    endwith: str = typer.Option("", "--endwith", help="records end with X"),
    contains: str = typer.Option("", "--contains", help="records contain X"),
    page_size: int = typer.Option(DEFAULT_PAGE_SIZE, "--page-size", hidden=True, help="Names emitted per output page"),
    insecure: bool = typer.Option(False, "--insecure", help="Allow connections to registries with invalid TLS certificates"),
    plain_http: bool = typer.Option(False, "--plain-http", help="Use plain HTTP instead of HTTPS"),
    username: Optional[str] = typer.Option(None, "--username", "-u", help="Registry username"),
    password: Optional[str] = typer.Option(None, "--password", "-p", help="Registry password or identity token"),
) -> None:
    """[Preview] List the repositories under the registry."""

    def _list() -> None:
        context = _context(insecure, plain_http, username, password)
        ops = Operations(
            config=OpsConfig(page_size=page_size),
            settings=context.settings,
            registry_factory=context.registry,
        )
        opts = RepositoryListOptions(
            hostname=registry,
            first=first,
            skip=skip,
            startwith=startwith,
            endwith=endwith,
            contains=contains,
        )
        try:
            print_repositories(ops.list_repositories(opts))
        finally:
            context.close()

    run_and_exit(_list)

repo_app.command("ls")(list_repositories)
repo_app.command("list", hidden=True)(list_repositories)

@manifest_app.command("fetch")
def fetch_manifest(
    reference: str = typer.Argument(..., help="Manifest reference, e.g. localhost:5000/hello:v1"),
    export_manifest: str = typer.Option("", "--export-manifest", help="export the fetched manifest to a file"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Do not print the manifest to stdout"),
    insecure: bool = typer.Option(False, "--insecure", help="Allow connections to registries with invalid TLS certificates"),
    plain_http: bool = typer.Option(False, "--plain-http", help="Use plain HTTP instead of HTTPS"),
    username: Optional[str] = typer.Option(None, "--username", "-u", help="Registry username"),
    password: Optional[str] = typer.Option(None, "--password", "-p", help="Registry password or identity token"),
    show_descriptor: bool = typer.Option(False, "--descriptor", help="Print the resolved descriptor to stderr"),
) -> None:
    """Fetch a manifest from a registry."""

    def _fetch() -> None:
        ref = Reference.parse(reference)
        context = _context(insecure, plain_http, username, password)
        ops = Operations(
            config=OpsConfig(verbose=show_descriptor),
            settings=context.settings,
            registry_factory=context.registry,
        )
        try:
            result = ops.fetch_manifest(ref, PackerOptions(manifest_export_path=export_manifest))
        finally:
            context.close()
        if not quiet:
            print_manifest(result, verbose=ops.cfg.verbose)

    run_and_exit(_fetch)

@annotations_app.command("resolve")
def resolve_annotations(
    annotation: Optional[List[str]] = typer.Option(None, "--annotation", "-a", help="manifest annotations (key=value, repeatable)"),
    annotations_file: str = typer.Option("", "--annotations-file", help="path of the annotation file"),
    export_manifest: str = typer.Option("", "--export-manifest", help="export the pushed manifest"),
    disable_path_validation: bool = typer.Option(False, "--disable-path-validation", help="skip path validation"),
) -> None:
    """Resolve manifest annotations from flags or an annotations file and print them as JSON."""

    def _resolve() -> None:
        packer = PackerOptions(
            manifest_export_path=export_manifest,
            path_validation_disabled=disable_path_validation,
            annotations_file_path=annotations_file,
            manifest_annotations=tuple(annotation or ()),
        )
        # Purely local: registry configuration is not loaded
        ops = Operations(config=OpsConfig(), settings=Settings())
        print_annotations(ops.resolve_annotations(packer))

    run_and_exit(_resolve)

def main() -> None:
    """CLI entry point."""
    app()

if __name__ == "__main__":
    main()
