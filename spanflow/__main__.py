"""Entry point for ``python -m spanflow``."""

from spanflow.cli import main

if __name__ == "__main__":
    main()
