"""Entry point for Noted.

    noted                          # Ensure a current vault is set
    noted vault                    # Interactive vault selection/creation menu
    noted vault --open <name>      # Open vault by name
    noted vault --open <index>     # Open vault by index (1-based)
    noted vault list               # List all configured vaults
    noted vault current            # Show current vault
    noted vault create <path>      # Create new vault at specified path
    noted vault info [<name>]      # Show a vault's vault.json details
"""

from noted.interfaces.cli.app import run_cli


def main():
    """Main entry point."""
    run_cli()


if __name__ == "__main__":
    main()
