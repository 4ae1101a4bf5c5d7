from codables.cli import main

main()
