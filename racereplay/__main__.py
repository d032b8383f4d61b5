from racereplay.cli import main

main()
