"""CLI Commands"""

import os

from autocommit.config import (
    API_KEY_FILENAME, CredentialError, get_config_path, load_config, resolve_api_key,
)
from autocommit.output import bold, dim, info, warning

ENV_OVERRIDES = ('AUTO_COMMIT_MODEL', 'AUTO_COMMIT_TIMEOUT')


def display_config() -> int:
    """Display current configuration. The API key itself is never shown."""
    config = load_config()
    config_path = get_config_path()

    print(f"\n{bold('Current Configuration')}\n")

    if config_path:
        print(f"  {dim('Loaded from:')} {config_path}")
    else:
        print(f"  {dim('Loaded from:')} defaults (no .autocommitrc found)")

    overrides = [(name, os.environ[name]) for name in ENV_OVERRIDES if os.environ.get(name)]
    if overrides:
        print(f"  {dim('Environment overrides:')}")
        for name, value in overrides:
            print(f"    {name}={value}")

    try:
        _, source = resolve_api_key()
        print(f"  {dim('API key:')} {source}")
    except CredentialError:
        print(f"  {dim('API key:')} {warning('not found')}")

    print()
    print(f"  {bold('Settings:')}")
    for key, value in config.to_dict().items():
        shown = str(value).lower() if isinstance(value, bool) else str(value)
        print(f"    {key + ':':<20}{info(shown)}")

    print(f"\n  {dim('Config locations:')}")
    print("    Local:  .autocommitrc (in current directory)")
    print("    Global: ~/.autocommitrc")
    print(f"    Key:    ~/{API_KEY_FILENAME}\n")

    return 0
