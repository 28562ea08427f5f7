from workflows.cli.app import main

main()
