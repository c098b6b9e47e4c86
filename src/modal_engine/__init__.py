"""Modal, vim-style keystroke interpretation engine."""

__all__ = [
    "actions",
    "adapters",
    "engine",
    "keymaps",
    "keys",
    "modes",
    "runtime",
]

__version__ = "0.1.0"
