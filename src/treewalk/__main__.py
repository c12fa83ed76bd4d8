from treewalk.cli.commands import app

app(prog_name="treewalk")
