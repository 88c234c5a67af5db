"""wheredunno: group chat with an assistant that remembers where people went."""

__version__ = "0.1.0"
