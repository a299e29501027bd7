from canvas_shell.cli.app import app

app()
