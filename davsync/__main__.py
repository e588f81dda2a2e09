"""Allow running davsync as ``python -m davsync``."""

from .cli import main

if __name__ == "__main__":
    main()
