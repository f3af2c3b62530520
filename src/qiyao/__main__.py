from pathlib import Path
import logging
import os
import sys

from dotenv import load_dotenv

# Ensure the src directory is on sys.path when running as a script
_SRC_DIR = Path(__file__).resolve().parents[1]
if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))

from qiyao.bootstrap import create_game_service
from qiyao.presentation.arbiter_console import run_arbiter_console

load_dotenv()


def _print_help_surface() -> None:
    print("\nHelp:")
    print("- At the arbiter> prompt type 'help' for the command list, 'quit' to leave.")
    print("- Narrative: set QIYAO_GEMINI_API_KEY for generated text, or leave it unset for offline text.")
    print("- Startup issues: verify QIYAO_DATABASE_URL or unset it to keep save slots in memory.")


def _is_database_connectivity_error(exc: Exception) -> bool:
    text = str(exc).lower()
    markers = (
        "save slot database bootstrap failed",
        "can't connect to mysql server",
        "connection refused",
        "unable to open database file",
        "sqlalchemy.exc.operationalerror",
    )
    return any(marker in text for marker in markers)


def main():
    logging.basicConfig(level=os.getenv("QIYAO_LOG_LEVEL", "WARNING").upper())
    try:
        game_service = create_game_service()
        run_arbiter_console(game_service)
    except KeyboardInterrupt:
        print("\nSession ended.")
    except Exception as exc:
        if os.getenv("QIYAO_DATABASE_URL") and _is_database_connectivity_error(exc):
            print("Save slot database unavailable; retrying in-memory mode.")
            os.environ.pop("QIYAO_DATABASE_URL", None)
            try:
                game_service = create_game_service()
                run_arbiter_console(game_service)
                return
            except KeyboardInterrupt:
                print("\nSession ended.")
                return
            except Exception as fallback_exc:
                exc = fallback_exc
        print("An unexpected error occurred. The game closed safely.")
        print(f"Reason: {exc}")
        _print_help_surface()


if __name__ == "__main__":
    main()
