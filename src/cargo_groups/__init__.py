"""cargo-groups — run cargo commands on named groups of workspace crates."""

__version__ = "0.2.0"
