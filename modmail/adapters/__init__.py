"""Adapters binding the ports to Discord, MongoDB and HTTP."""
