"""ocictl - command-line OCI artifact client."""

__version__ = "0.1.0"
