from earlgrey.cli import main

main()
