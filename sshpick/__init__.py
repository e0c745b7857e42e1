"""sshpick - pick a host from your SSH config and connect to it."""

__version__ = "0.3.0"
