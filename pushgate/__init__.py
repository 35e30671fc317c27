"""pushgate: multi-channel group-chat webhook notifications."""

__version__ = "0.1.0"
