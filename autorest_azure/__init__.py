"""autorest-azure: Azure REST conventions as composable httpx decorators."""

__version__ = "0.1.0"
