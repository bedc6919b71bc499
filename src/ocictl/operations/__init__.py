"""
Operations package - Application service layer between CLI and registry client.

This package provides the Operations facade that orchestrates CLI commands,
centralizes error mapping, and handles output formatting while keeping
CLI commands thin and testable.
"""
from .facade import ManifestResult, Operations, OpsConfig
from .mappers import exit_code_for, run_and_exit

__all__ = ["ManifestResult", "Operations", "OpsConfig", "exit_code_for", "run_and_exit"]
