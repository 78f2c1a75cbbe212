"""
Dataset Loader - Read and Validate the Progression Dataset

Progressions live in a YAML file shipped with the package. Loading parses
the file with yaml.safe_load and validates each record into a Progression,
so a typo in the data fails loudly at import instead of producing odd
suggestions later.

Usage:
    from harmony_engine.data.dataset import load_progressions

    progressions = load_progressions()
    print(len(progressions))  # 90+
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

import yaml
from pydantic import ValidationError

from harmony_engine.config import get_dataset_path
from harmony_engine.data.schema import Progression
from harmony_engine.exceptions import DatasetError

logger = logging.getLogger(__name__)


def load_progressions(path: Optional[Union[str, Path]] = None) -> List[Progression]:
    """
    Load and validate progressions from a YAML file.

    Args:
        path: YAML file to read; defaults to the packaged dataset (or the
              file named by the HARMONY_ENGINE_PROGRESSIONS variable)

    Returns:
        Progressions in file order

    Raises:
        DatasetError: If the file is missing, not YAML, or a record is invalid
    """
    path = Path(path) if path is not None else get_dataset_path()

    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except OSError as e:
        raise DatasetError(f"Cannot read progression dataset {path}: {e}") from e
    except yaml.YAMLError as e:
        raise DatasetError(f"Progression dataset {path} is not valid YAML: {e}") from e

    if not isinstance(raw, dict) or not isinstance(raw.get("progressions"), list):
        raise DatasetError(f"{path} must contain a top-level 'progressions' list")

    progressions = []
    seen_ids = set()
    for index, record in enumerate(raw["progressions"]):
        if not isinstance(record, dict):
            raise DatasetError(f"Record #{index} in {path} is not a mapping")
        try:
            prog = Progression(**record)
        except ValidationError as e:
            raise DatasetError(
                f"Record #{index} ({record.get('id', '?')}) in {path} is invalid: {e}"
            ) from e
        if prog.id in seen_ids:
            raise DatasetError(f"Duplicate progression id '{prog.id}' in {path}")
        seen_ids.add(prog.id)
        progressions.append(prog)

    logger.info("Loaded %d progressions from %s", len(progressions), path)
    return progressions


def save_progressions(progressions: List[Progression], path: Union[str, Path]) -> None:
    """Write progressions back to YAML in the same layout load_progressions reads."""
    records = [p.model_dump(mode="json") for p in progressions]
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(
            {"progressions": records},
            f,
            allow_unicode=True,
            sort_keys=False,
        )
    logger.info("Saved %d progressions to %s", len(progressions), path)
