from localcast_host.main import main

if __name__ == "__main__":
    main()
