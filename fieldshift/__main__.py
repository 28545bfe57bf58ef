from fieldshift.cli import cli

cli()
