from regenurl.ui.cli import run

run()
