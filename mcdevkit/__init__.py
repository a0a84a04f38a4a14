"""
mcdevkit - a Python CLI tool for spinning up Minecraft development servers.

This package downloads a server for a requested Minecraft version, prepares
a working directory with the EULA accepted and plugins copied in, and runs
the server in the foreground until it stops or is interrupted.
"""

__version__ = "0.1.0"
__author__ = "luannndev"
