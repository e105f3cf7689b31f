import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from cli.quest_cmd import eternal_quest
from quest.logger import setup_logging


def main():
    """Main entry point for Eternal Quest."""
    setup_logging()
    eternal_quest(prog_name="eternal-quest")


if __name__ == "__main__":
    main()
