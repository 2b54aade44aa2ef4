from expressos.cli import run

run()
