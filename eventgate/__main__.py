from eventgate.cli import cli

cli()
