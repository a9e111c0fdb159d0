"""CVFast: résumé builder API with shareable short links."""

__version__ = "0.1.0"


def main() -> None:
    """Entry point for the application."""
    from cvfast.api.main import main as api_main

    api_main()
