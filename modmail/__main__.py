from modmail.app import main

main()
