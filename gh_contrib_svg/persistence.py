"""
Persistence of contributors already seen by earlier runs.

Each run identifier owns one JSON file, ``<identifier>.json``, holding the
logins of the last run in ranked order.
"""

import json
import logging
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger("gh-contrib-svg.persistence")


class PersistenceError(RuntimeError):
    """Raised when a seen-contributors file cannot be read."""


def seen_path(identifier: str, output_dir: Path) -> Path:
    return output_dir / f"{identifier}.json"


def load_seen(identifier: str, output_dir: Path) -> Optional[List[str]]:
    """
    Load the logins saved by the previous run.

    Returns:
        The saved logins, or None if no previous run was saved

    Raises:
        PersistenceError: If the file exists but is not a JSON list of strings
    """
    path = seen_path(identifier, output_dir)
    if not path.exists():
        return None
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise PersistenceError(f"Cannot read {path}: {e}") from e
    if not isinstance(data, list) or not all(isinstance(login, str) for login in data):
        raise PersistenceError(f"{path} does not hold a list of logins")
    return data


def check_new_contributors(identities: List[str], identifier: str, output_dir: Path) -> List[str]:
    """Return the logins in ``identities`` that the previous run had not seen, in order."""
    seen = load_seen(identifier, output_dir)
    if seen is None:
        logger.info("No previous contributors saved for %s", identifier)
        return list(identities)
    known = set(seen)
    new = [login for login in identities if login not in known]
    if new:
        logger.info("New contributors since last run: %s", ", ".join(new))
    else:
        logger.info("No new contributors since last run")
    return new


def save_seen(identities: List[str], identifier: str, output_dir: Path) -> Path:
    """Save ``identities`` as the seen list of ``identifier``."""
    output_dir.mkdir(parents=True, exist_ok=True)
    path = seen_path(identifier, output_dir)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(list(identities), f, indent=2)
        f.write("\n")
    logger.debug("Saved %d contributors to %s", len(identities), path)
    return path
