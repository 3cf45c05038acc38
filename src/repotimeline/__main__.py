from repotimeline.ui.cli import run

run()
