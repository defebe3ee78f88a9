from erpdeploy.main import main

main()
