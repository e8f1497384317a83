"""Allow ``python -m drifty``."""

from .cli import main

if __name__ == "__main__":
    main()
