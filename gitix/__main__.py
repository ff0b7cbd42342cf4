from gitix.cli.app import app

app()
