"""Client, service ticket and finance management for small service companies."""

__version__ = "0.1.0"


def __getattr__(name):
    # The CLI pulls in every layer, so it is only loaded on first access
    if name == "main":
        from servicedesk.cli.main import main

        return main
    raise AttributeError(f"module 'servicedesk' has no attribute '{name}'")
