from glance._cli import main

main()
