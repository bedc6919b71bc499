"""
Test error mapping and CLI exit code functionality.

Validates that exceptions are correctly mapped to exit codes and that
the run_and_exit wrapper handles errors appropriately for CLI commands.
"""
from __future__ import annotations

import pytest
import typer

from ocictl.annotations import (
    AnnotationConflictError,
    AnnotationDuplicationError,
    AnnotationFileError,
    AnnotationFormatError,
)
from ocictl.operations.mappers import EXIT_CODES, exit_code_for, run_and_exit
from ocictl.storage.oci_errors import OciAuthError, OciDigestMismatch, OciError, OciNotFound, OciRateLimited


class TestExitCodeMapping:
    """Test exception to exit code mapping."""

    def test_known_exceptions_mapped_correctly(self):
        """Test that domain exceptions map to their exit codes."""
        assert exit_code_for(OciNotFound("x")) == 1
        assert exit_code_for(AnnotationConflictError()) == 2
        assert exit_code_for(AnnotationFormatError("x")) == 2
        assert exit_code_for(AnnotationDuplicationError("k")) == 2
        assert exit_code_for(AnnotationFileError("f", "bad")) == 2
        assert exit_code_for(OciError("x")) == 3
        assert exit_code_for(OciAuthError("x")) == 4

    def test_unmapped_exceptions_use_fallback(self):
        """Test that unknown exceptions map to the fallback code."""
        assert exit_code_for(ValueError("test")) == 2
        assert exit_code_for(RuntimeError("test")) == 3
        assert exit_code_for(FileNotFoundError("test")) == 3
        assert exit_code_for(OciRateLimited("slow down")) == 3
        assert exit_code_for(OciDigestMismatch("bad")) == 3

    def test_exit_code_values(self):
        """Test the exit code table."""
        assert EXIT_CODES["OciNotFound"] == 1
        assert EXIT_CODES["ValueError"] == 2
        assert EXIT_CODES["OciError"] == 3
        assert EXIT_CODES["OciAuthError"] == 4


class TestRunAndExit:
    """Test run_and_exit wrapper functionality."""

    def test_successful_function_returns_result(self):
        """Test that successful function execution returns result."""
        assert run_and_exit(lambda: "success result") == "success result"

    def test_function_exception_raises_typer_exit(self, capsys):
        """Test that exceptions become typer.Exit with a stderr message."""
        def failing_func():
            raise OciNotFound("manifest not found")

        with pytest.raises(typer.Exit) as exc_info:
            run_and_exit(failing_func)

        assert exc_info.value.exit_code == 1
        assert isinstance(exc_info.value.__cause__, OciNotFound)
        assert "Error: manifest not found" in capsys.readouterr().err

    def test_typer_exit_passes_through(self):
        """Test that an explicit typer.Exit keeps its code."""
        def exiting_func():
            raise typer.Exit(code=7)

        with pytest.raises(typer.Exit) as exc_info:
            run_and_exit(exiting_func)
        assert exc_info.value.exit_code == 7
