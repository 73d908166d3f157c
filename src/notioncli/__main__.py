from notioncli.cli.main import main

main()
