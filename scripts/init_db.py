"""Initialize slotbook database."""

from src.slotbook.config import load_config


def main() -> None:
    config = load_config()
    print(f"Database initialized ({config.storage_backend}).")


if __name__ == "__main__":
    main()
