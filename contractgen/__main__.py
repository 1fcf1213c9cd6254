from contractgen.app import main

main()
