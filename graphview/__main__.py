from graphview.app import main

main()
