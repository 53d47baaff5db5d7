"""Label encoding of categorical columns."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any, NamedTuple

import numpy as np
import pandas as pd

from ..config import UnknownCategoryPolicy
from ..errors import InvalidDataError, NotFittedError, UnknownCategoryError


class Lookup(NamedTuple):
    """Result of looking up one value in an EncodingMap."""

    found: bool
    code: int | None


@dataclass(frozen=True)
class EncodingMap:
    """Bijection from observed categories to ``0..k-1``.

    Codes follow the order in which categories were first seen.
    """

    column: str
    categories: tuple[Any, ...]
    _codes: dict[Any, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "_codes", {value: code for code, value in enumerate(self.categories)}
        )

    @classmethod
    def from_values(cls, column: str, values: Iterable[Any]) -> EncodingMap:
        """Build a map from values in first-seen order, skipping missing ones."""
        distinct = pd.unique(pd.Series(list(values), dtype=object).dropna())
        return cls(column, tuple(distinct))

    def __len__(self) -> int:
        return len(self.categories)

    def __contains__(self, value: object) -> bool:
        return value in self._codes

    def lookup(self, value: Any) -> Lookup:
        code = self._codes.get(value)
        return Lookup(found=code is not None, code=code)

    def as_dict(self) -> dict[Any, int]:
        return dict(self._codes)


class CategoricalEncoder:
    """Encodes one categorical column as consecutive integers.

    The map is built once from training data and reused for any later data.
    Values that were never seen during fit either raise
    UnknownCategoryError or, with the RESERVE policy, map to the extra
    code ``k``. Missing values stay missing and become NaN.
    """

    def __init__(
        self,
        column: str,
        unknown: UnknownCategoryPolicy = UnknownCategoryPolicy.ERROR,
    ) -> None:
        self.column = column
        self.unknown = unknown
        self._map: EncodingMap | None = None

    @property
    def is_fitted(self) -> bool:
        return self._map is not None

    @property
    def mapping(self) -> EncodingMap:
        if self._map is None:
            raise NotFittedError(f"CategoricalEncoder({self.column!r})")
        return self._map

    def fit(self, values: pd.Series) -> CategoricalEncoder:
        """Build the encoding map from training values."""
        self._map = EncodingMap.from_values(self.column, values)
        return self

    def transform(self, values: pd.Series) -> pd.Series:
        """Rewrite every value by its code.

        Returns:
            An int64 Series, or float64 if any value is missing.

        Raises:
            NotFittedError: If called before fit.
            UnknownCategoryError: If a value was not seen during fit and the
                policy is ERROR.
        """
        mapping = self.mapping
        codes = np.empty(len(values), dtype=float)
        unknown: list[Any] = []
        for i, value in enumerate(values.astype(object)):
            if pd.isna(value):
                codes[i] = np.nan
                continue
            found, code = mapping.lookup(value)
            if found:
                codes[i] = code
            elif self.unknown is UnknownCategoryPolicy.RESERVE:
                codes[i] = len(mapping)
            else:
                unknown.append(value)

        if unknown:
            raise UnknownCategoryError(self.column, list(dict.fromkeys(unknown)))

        result = pd.Series(codes, index=values.index, name=values.name)
        if not result.isna().any():
            result = result.astype(np.int64)
        return result

    def fit_transform(self, values: pd.Series) -> pd.Series:
        return self.fit(values).transform(values)

    def decode(self, codes: Iterable[int]) -> list[Any]:
        """Map codes back to the original categories.

        The reserved unknown code decodes to None.

        Raises:
            InvalidDataError: If a code is negative or past the reserved code.
        """
        categories = self.mapping.categories
        result: list[Any] = []
        for c in codes:
            code = int(c)
            if code < 0 or code > len(categories):
                raise InvalidDataError(f"Column '{self.column}' has no category for code {code}")
            result.append(categories[code] if code < len(categories) else None)
        return result
