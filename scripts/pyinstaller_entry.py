"""PyInstaller entry point.

Lives outside the package so running it as a script does not put
``workflows/`` on sys.path, where ``workflows/platform`` would hide the
standard library ``platform`` module.
"""

from workflows.cli.app import main

main()
