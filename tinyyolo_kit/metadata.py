from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, List, Union


def _parse_names_mapping(lines: List[str]) -> Dict[int, str]:
    names: Dict[int, str] = {}
    in_names = False
    for raw in lines:
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        if line == "names:":
            in_names = True
            continue
        if not in_names:
            continue

        # Parse "id: label"
        if ":" not in line:
            continue
        left, right = line.split(":", 1)
        left = left.strip()
        right = right.strip().strip("'").strip('"')
        if not left.isdigit():
            continue
        names[int(left)] = right
    return names


def load_labels(labels_path: Union[str, Path]) -> List[str]:
    """
    Load class labels in model output order.

    Two formats are understood:

    - plain text, one label per line (blank lines ignored):

        aeroplane
        bicycle
        ...

    - a `names:` mapping as used by `metadata.yaml` exports:

        names:
          0: aeroplane
          1: bicycle

    The mapping must cover ids 0..N-1 without gaps.
    """

    path = Path(labels_path)
    if not path.exists():
        raise FileNotFoundError(f"Labels file not found: {path}")
    text = path.read_text(encoding="utf-8")
    lines = [s for s in re.split(r"\r\n|\n|\r", text) if s.strip()]

    if any(line.strip() == "names:" for line in lines):
        names = _parse_names_mapping(lines)
        if sorted(names) != list(range(len(names))):
            raise ValueError(f"Label ids in {path} must be contiguous from 0, got {sorted(names)}")
        return [names[i] for i in range(len(names))]

    return [line.strip() for line in lines]
