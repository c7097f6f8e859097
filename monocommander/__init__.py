"""Node operator toolkit: RPC clients, redacting command runner, systemd units and sidecar management."""

__version__ = "0.1.0"