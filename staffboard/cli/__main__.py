"""Allow ``python -m staffboard.cli``."""

from staffboard.cli import main

if __name__ == "__main__":
    main()
