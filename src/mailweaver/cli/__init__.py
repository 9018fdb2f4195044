from mailweaver.cli.main import cli

__all__ = ["cli"]
