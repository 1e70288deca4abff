"""Allow running as ``python -m llm_translate``."""

from llm_translate.cli.app import run


if __name__ == "__main__":
    run()
