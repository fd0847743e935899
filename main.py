from src.sitesmith.app.sitesmith_app import main


if __name__ == "__main__":
    """
    Main entry point for the Sitesmith application.
    """
    main()
