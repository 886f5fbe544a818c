"""Entry point for 'python -m padgroups' command."""

from padgroups.cli import main

if __name__ == "__main__":
    main()
