"""devsetup — developer workstation provisioning for Arch and Debian hosts."""

__version__ = "0.1.0"
