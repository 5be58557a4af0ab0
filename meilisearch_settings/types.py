from __future__ import annotations

from collections.abc import Hashable, Mapping, Sequence
from typing import Any, TypeAlias

JsonDict: TypeAlias = dict[str, Any]
SynonymsInput: TypeAlias = Mapping[Hashable, Sequence[Any]]
