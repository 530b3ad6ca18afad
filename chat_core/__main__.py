from chat_core.presentation.console import main

if __name__ == "__main__":
    main()
