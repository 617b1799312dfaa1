"""Inspect or reset the local scorekeeping store.

Usage: uv run python bin/tallypad.py <list|migrate|clear>

  list     print every saved game, most recently played first
  migrate  bring the store up to the current schema version
  clear    permanently delete all games and course templates

The database location comes from TALLY_DATABASE_PATH.
"""

import asyncio
import sys
from pathlib import Path

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "backend"))

from scoring import engine
from tally.app import TallyPad
from tally.settings import TallySettings

_COMMANDS = ("list", "migrate", "clear")


async def main() -> None:
    if len(sys.argv) != 2 or sys.argv[1] not in _COMMANDS:
        print(f"Usage: {sys.argv[0]} <{'|'.join(_COMMANDS)}>")
        sys.exit(1)

    command = sys.argv[1]
    app = TallyPad(TallySettings())
    await app.open()

    try:
        if command == "migrate":
            print(f"Store at schema version {app.schema_version}")
        elif command == "clear":
            await app.clear_all_data()
            print("All games and course templates deleted.")
        else:
            games = await app.service.list_games()
            if not games:
                print("No saved games.")
            for game in games:
                totals = ", ".join(f"{player}: {score}" for player, score in engine.totals(game).items())
                print(f"{game.id}  {game.name:<12} {game.status:<11} {game.created_date:<18} {totals}")
    finally:
        app.close()


if __name__ == "__main__":
    asyncio.run(main())
