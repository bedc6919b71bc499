"""
Error mapping and CLI utilities.

Provides centralized exception-to-exit-code mapping and CLI command wrappers
to ensure consistent error handling across all Typer commands.
"""
from __future__ import annotations

import typer
from typing import Callable, TypeVar

T = TypeVar('T')

EXIT_CODES = {
    "OciNotFound": 1,
    "ValueError": 2,
    "AnnotationError": 2,
    "AnnotationConflictError": 2,
    "AnnotationFormatError": 2,
    "AnnotationDuplicationError": 2,
    "AnnotationFileError": 2,
    "ValidationError": 2,
    "OciError": 3,
    "OciAuthError": 4,
}

def exit_code_for(exc: BaseException) -> int:
    """
    Map exception to standardized exit code.

    Returns exit codes:
    - 0: Success
    - 1: Not found in registry (OciNotFound)
    - 2: Invalid input (annotation errors, ValueError, ValidationError)
    - 3: Registry/network error (OciError) or unknown error
    - 4: Authentication failure (OciAuthError)

    Args:
        exc: Exception to map

    Returns:
        Exit code (1-4, with 3 as fallback for unknown exceptions)
    """
    return EXIT_CODES.get(type(exc).__name__, 3)

def run_and_exit(func: Callable[[], T]) -> T:
    """
    Unified error wrapper for CLI commands.

    Executes the given function, prints any error to stderr and maps it to
    an exit code using typer.Exit. This centralizes error handling so CLI
    commands don't need individual try/except blocks.

    Args:
        func: Function to execute

    Returns:
        Function result if successful

    Raises:
        typer.Exit: With appropriate exit code if function raises exception
    """
    try:
        return func()
    except typer.Exit:
        raise
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=exit_code_for(e)) from e
