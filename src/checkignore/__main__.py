"""Allow running checkignore as ``python -m checkignore``."""

from checkignore.cli.main import main

if __name__ == "__main__":
    main()
