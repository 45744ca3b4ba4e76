"""Package entry point for ``python -m forge_client``."""

from forge_client.cli import main

if __name__ == "__main__":
    main()
