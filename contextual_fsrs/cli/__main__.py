"""Allow running the CLI as: python -m contextual_fsrs.cli"""

from contextual_fsrs.cli.main import run

if __name__ == "__main__":
    run()
