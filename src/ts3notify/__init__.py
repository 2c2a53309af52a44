"""ts3notify - announce TeamSpeak 3 joins and leaves to a chat webhook."""

__version__ = "0.1.0"
