from docforge.cli import main

main()
