from unfurl.cli.main import cli

cli()
