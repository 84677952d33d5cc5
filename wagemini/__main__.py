from wagemini.cli import main

main()
