#!filepath: scopetimer/__main__.py
from scopetimer.cli import app

app(prog_name="scopetimer")
