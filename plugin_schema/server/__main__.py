"""Module entrypoint for `python -m plugin_schema.server`."""

import sys

from ..config import validator_config
from .server import PluginSchemaLanguageServer


def main() -> None:
    # stdout carries the protocol stream
    validator_config.set_logging(low_stream=sys.stderr)
    PluginSchemaLanguageServer().start()


if __name__ == "__main__":
    main()
