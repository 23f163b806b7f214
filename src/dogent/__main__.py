from dogent.cli import app

app(prog_name="dogent")
