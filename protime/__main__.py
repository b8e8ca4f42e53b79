from protime.main import cli

cli()
