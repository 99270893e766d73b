"""Command mapping ("facts") parsing."""

import json

from fleet_facts.errors import ConfigError


def parse_commands(text: str) -> dict[str, str]:
    """Parse a JSON object mapping labels to shell commands.

    Label order is kept as written.

    Raises:
        ConfigError: If the text is not a JSON object of strings
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Facts must be valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(
            f"Facts must be a JSON object of label to command, got {type(data).__name__}"
        )

    for label, command in data.items():
        if not label.strip():
            raise ConfigError("Fact labels must not be empty")
        if not isinstance(command, str):
            raise ConfigError(
                f"Command for fact '{label}' must be a string, "
                f"got {type(command).__name__}"
            )

    return dict(data)
