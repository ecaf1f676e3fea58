"""Bootstrap orchestrator for a single-node Celestia devnet."""

__version__ = "0.1.0"
