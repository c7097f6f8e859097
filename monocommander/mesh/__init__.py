"""Mesh/Rosetta sidecar configuration, installation, systemd control, journal logs and health checks."""