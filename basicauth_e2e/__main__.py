"""Allow ``python -m basicauth_e2e``."""

from basicauth_e2e.cli.main import main

if __name__ == "__main__":
    main()
