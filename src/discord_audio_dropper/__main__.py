"""Allow ``python -m discord_audio_dropper``."""

from discord_audio_dropper.bots.dropper_bot import run

if __name__ == "__main__":
    run()
