"""
Output formatting.

Centralizes all CLI output so commands stay thin. Repository listings are
one bare name per line so they can be piped into other tools.
"""
from __future__ import annotations

import json
from typing import Iterable, List

import typer

from ..annotations import AnnotationSet
from .facade import ManifestResult

def print_repositories(pages: Iterable[List[str]]) -> None:
    """Print repository names one per line, page by page, with no decoration."""
    for page in pages:
        for repo in page:
            typer.echo(repo)

def print_manifest(result: ManifestResult, verbose: bool = False) -> None:
    """
    Print the raw manifest bytes exactly as served.

    With verbose, the descriptor is printed to stderr first so stdout stays
    byte-identical to the registry content.
    """
    if verbose:
        typer.echo(f"Reference: {result.reference}", err=True)
        typer.echo(f"Digest: {result.descriptor.digest}", err=True)
        typer.echo(f"Media type: {result.descriptor.media_type}", err=True)
        typer.echo(f"Size: {result.descriptor.size}", err=True)
    typer.echo(result.content, nl=False)

def print_annotations(annotations: AnnotationSet) -> None:
    """Print the annotation set as indented JSON with sorted scopes."""
    typer.echo(json.dumps(annotations, indent=2, sort_keys=True))
