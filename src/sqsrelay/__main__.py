"""Allow running the daemon with ``python -m sqsrelay``."""

from sqsrelay.main import main

if __name__ == "__main__":
    main()
