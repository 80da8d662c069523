"""API key resolution: environment first, then a dotfile in the home directory."""

import os
from pathlib import Path
from typing import Mapping, Optional

from autocommit import AutoCommitError

API_KEY_ENV = "OPENAI_API_KEY"
API_KEY_FILENAME = ".auto-commit-openai-api-key"


class CredentialError(AutoCommitError):
    """Raised when no API key can be found."""
    pass


def resolve_api_key(environ: Optional[Mapping[str, str]] = None,
                    home: Optional[Path] = None) -> tuple[str, str]:
    """Return (api_key, description of where it came from)."""
    environ = os.environ if environ is None else environ

    from_env = (environ.get(API_KEY_ENV) or "").strip()
    if from_env:
        return from_env, f"Using {API_KEY_ENV} environment variable"

    home = Path.home() if home is None else home
    key_path = home / API_KEY_FILENAME
    try:
        from_file = key_path.read_text(encoding='utf-8').strip()
    except FileNotFoundError:
        from_file = ""
    except OSError as e:
        raise CredentialError(f"Could not read {key_path}: {e}")

    if from_file:
        return from_file, f"Using OpenAI API key from ~/{API_KEY_FILENAME}"

    raise CredentialError(
        "No OpenAI API key found. Either:\n"
        f"  export {API_KEY_ENV}='your-key-here'\n"
        "or save the key to a file:\n"
        f"  echo 'your-key-here' > ~/{API_KEY_FILENAME}"
    )
