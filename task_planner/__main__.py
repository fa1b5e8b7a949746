from .gui import main

main()
