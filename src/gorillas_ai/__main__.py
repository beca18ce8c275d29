"""Module entrypoint for `python -m gorillas_ai`."""

if __package__ is None or __package__ == "":
    import sys
    from pathlib import Path

    sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from gorillas_ai.play_ai import run_ai


if __name__ == "__main__":
    run_ai()
