from mailweaver.cli.main import cli

cli()
