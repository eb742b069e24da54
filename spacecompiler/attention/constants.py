"""Constants for TF-IDF attention scoring."""

from __future__ import annotations

import re
from typing import FrozenSet

ALGORITHM = "TF-IDF + Cosine Similarity + Softmax"

# Whitespace plus the punctuation blocks are split on before term counting.
SPLIT_CHARACTERS: FrozenSet[str] = frozenset(" \t\n\r.,;:!?()[]{}\"'-_")
SPLIT_PATTERN = re.compile("[" + re.escape("".join(sorted(SPLIT_CHARACTERS))) + "]+")

# Tokens shorter than this are discarded.
MIN_TOKEN_LENGTH = 3

PREVIEW_LENGTH = 100
PREVIEW_SUFFIX = "..."

ADJACENT_BOOST = 1.5
NEARBY_BOOST = 1.2
NEARBY_WINDOW = 3
SELF_RELEVANCE = 1.0
