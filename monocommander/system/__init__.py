"""Command running with output redaction and systemd unit generation for the node."""