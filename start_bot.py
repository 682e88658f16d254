#!/usr/bin/env python3
"""
Startup script for the Discord Audio Dropper Bot.

Runs the bot from a source checkout without installing the package.
"""

import sys
from pathlib import Path

# Add the src directory to the Python path
src_dir = Path(__file__).parent / "src"
if str(src_dir) not in sys.path:
    sys.path.insert(0, str(src_dir))

from discord_audio_dropper.bots.dropper_bot import run

if __name__ == "__main__":
    run()
