from osiris_shell.cli import app

app()
