from rancher_client.cli.main import main


main()
