"""devbench — dev-container, Homebrew and local-binary tooling."""

__version__ = "0.1.0"
