"""Input Normalizer — parses raw textual parameters into bounded, validated input.

Tokenizing happens here; range and cross-parameter rules live on the
pydantic models so a model instance is always a valid input.  Every
failure surfaces as ``InputValidationError`` naming the offending field.
"""

from __future__ import annotations

import json
import logging
import math
import re
import sys
from typing import Any, Callable, Mapping, Union

from pydantic import BaseModel, ValidationError, field_validator, model_validator

from . import constants

logger = logging.getLogger(__name__)

Number = Union[int, float]

_SEPARATOR = re.compile(constants.TOKEN_SEPARATOR_PATTERN)


class InputValidationError(Exception):
    """Raised when raw input cannot be normalized; carries a field-level message."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


# ── Tokenizing ───────────────────────────────────────────────────


def _tokens(text: str) -> list[str]:
    return [token for token in _SEPARATOR.split(text.strip()) if token]


def _parse_number(token: str, field: str) -> Number:
    try:
        number = float(token)
    except ValueError as exc:
        raise InputValidationError(field, f"'{token}' is not a number") from exc
    if math.isnan(number) or math.isinf(number):
        raise InputValidationError(field, f"'{token}' is not a finite number")
    return int(number) if number.is_integer() else number


def _parse_optional_int(text: str | None, field: str) -> int | None:
    """Blank means ``None``; anything else must be an integer."""
    if text is None or not text.strip():
        return None
    try:
        return int(text.strip())
    except ValueError as exc:
        raise InputValidationError(field, f"'{text.strip()}' is not an integer") from exc


def _first_error(exc: ValidationError, default_field: str) -> InputValidationError:
    error = exc.errors()[0]
    location = error.get("loc") or ()
    field = str(location[0]) if location else default_field
    message = str(error.get("msg", "invalid input")).removeprefix("Value error, ")
    return InputValidationError(field, message)


# ── Validated input models ───────────────────────────────────────


class TreeInput(BaseModel):
    values: list[Number | None] = []
    ceiling: int = constants.MAX_TREE_NODES

    @model_validator(mode="after")
    def check_size(self) -> "TreeInput":
        if len(self.values) > self.ceiling:
            raise ValueError(f"at most {self.ceiling} entries are allowed")
        return self

    @property
    def node_count(self) -> int:
        return sum(1 for value in self.values if value is not None)


class ArrayInput(BaseModel):
    values: list[Number]
    ceiling: int = constants.MAX_SUBARRAY_LENGTH

    @model_validator(mode="after")
    def check_size(self) -> "ArrayInput":
        if not self.values:
            raise ValueError("at least one number is required")
        if len(self.values) > self.ceiling:
            raise ValueError(f"at most {self.ceiling} numbers are allowed")
        return self


class RotationInput(ArrayInput):
    k: int
    ceiling: int = constants.MAX_ROTATE_LENGTH

    @field_validator("k")
    @classmethod
    def non_negative(cls, k: int) -> int:
        if k < 0:
            raise ValueError("k must be a non-negative integer")
        return k


class KthInput(TreeInput):
    k: int
    ceiling: int = constants.MAX_KTH_TREE_NODES

    @field_validator("k")
    @classmethod
    def positive(cls, k: int) -> int:
        if k < 1:
            raise ValueError("k must be a positive integer")
        return k


class CycleListInput(BaseModel):
    values: list[Number] = []
    pos: int = constants.NO_CYCLE

    @model_validator(mode="after")
    def check_cycle(self) -> "CycleListInput":
        if len(self.values) > constants.MAX_CYCLE_LIST_LENGTH:
            raise ValueError(
                f"at most {constants.MAX_CYCLE_LIST_LENGTH} nodes are allowed"
            )
        if self.pos < constants.NO_CYCLE:
            raise ValueError("pos must be -1 or a node index")
        if not self.values and self.pos != constants.NO_CYCLE:
            raise ValueError("an empty list can only use pos -1")
        if self.pos >= len(self.values) and self.pos != constants.NO_CYCLE:
            raise ValueError(f"pos must be less than the list length {len(self.values)}")
        return self


class IntersectionInput(BaseModel):
    list_a: list[Number]
    list_b: list[Number]
    join_a: int | None = None
    join_b: int | None = None

    @field_validator("list_a", "list_b")
    @classmethod
    def bounded(cls, values: list[Number]) -> list[Number]:
        if not values:
            raise ValueError("each list needs at least one node")
        if len(values) > constants.MAX_INTERSECTION_LIST_LENGTH:
            raise ValueError(
                f"at most {constants.MAX_INTERSECTION_LIST_LENGTH} nodes are allowed"
            )
        return values

    @field_validator("join_a", "join_b")
    @classmethod
    def negative_means_none(cls, index: int | None) -> int | None:
        return None if index is None or index < 0 else index

    @model_validator(mode="after")
    def check_join(self) -> "IntersectionInput":
        if self.join_a is not None and self.join_a >= len(self.list_a):
            raise ValueError(f"join_a must be less than {len(self.list_a)}")
        if self.join_b is not None and self.join_b >= len(self.list_b):
            raise ValueError(f"join_b must be less than {len(self.list_b)}")
        if self.has_join:
            tail_a = len(self.list_a) - self.join_a
            tail_b = len(self.list_b) - self.join_b
            if tail_a != tail_b:
                raise ValueError(
                    "lengths from the join point must match "
                    f"(list A has {tail_a}, list B has {tail_b})"
                )
        return self

    @property
    def has_join(self) -> bool:
        return self.join_a is not None and self.join_b is not None


class RandomListInput(BaseModel):
    entries: list[tuple[Number, int | None]] = []

    @model_validator(mode="after")
    def check_targets(self) -> "RandomListInput":
        if len(self.entries) > constants.MAX_RANDOM_LIST_LENGTH:
            raise ValueError(
                f"at most {constants.MAX_RANDOM_LIST_LENGTH} nodes are allowed"
            )
        for position, (_, target) in enumerate(self.entries):
            if target is not None and not 0 <= target < len(self.entries):
                raise ValueError(
                    f"entry {position}: random index {target} is out of range"
                )
        return self

    @property
    def values(self) -> list[Number]:
        return [value for value, _ in self.entries]

    @property
    def random_targets(self) -> list[int | None]:
        return [target for _, target in self.entries]


# ── Parse functions ──────────────────────────────────────────────


def _build(model: type[BaseModel], field: str, **data: Any) -> Any:
    try:
        return model(**data)
    except ValidationError as exc:
        raise _first_error(exc, field) from exc


def parse_tree(text: str, ceiling: int = constants.MAX_TREE_NODES) -> TreeInput:
    """Parse a level-order tree literal such as ``3, 9, 20, null, null, 15, 7``."""
    values: list[Number | None] = [
        None if token.lower() == constants.NULL_TOKEN else _parse_number(token, "tree")
        for token in _tokens(text)
    ]
    if values and values[0] is None:
        values = []
    return _build(TreeInput, "tree", values=values, ceiling=ceiling)


def parse_array(text: str, ceiling: int = constants.MAX_SUBARRAY_LENGTH) -> ArrayInput:
    values = [_parse_number(token, "values") for token in _tokens(text)]
    return _build(ArrayInput, "values", values=values, ceiling=ceiling)


def parse_rotation(values_text: str, k_text: str) -> RotationInput:
    values = [_parse_number(token, "values") for token in _tokens(values_text)]
    k = _parse_optional_int(k_text, "k")
    if k is None:
        raise InputValidationError("k", "k is required")
    return _build(RotationInput, "values", values=values, k=k)


def parse_kth(tree_text: str, k_text: str) -> KthInput:
    tree = parse_tree(tree_text, ceiling=constants.MAX_KTH_TREE_NODES)
    k = _parse_optional_int(k_text, "k")
    if k is None:
        raise InputValidationError("k", "k is required")
    return _build(KthInput, "tree", values=tree.values, k=k)


def parse_cycle_list(values_text: str, pos_text: str = "") -> CycleListInput:
    values = [_parse_number(token, "values") for token in _tokens(values_text)]
    pos = _parse_optional_int(pos_text, "pos")
    return _build(
        CycleListInput,
        "values",
        values=values,
        pos=constants.NO_CYCLE if pos is None else pos,
    )


def parse_intersection(
    list_a_text: str,
    list_b_text: str,
    join_a_text: str = "",
    join_b_text: str = "",
) -> IntersectionInput:
    return _build(
        IntersectionInput,
        "join",
        list_a=[_parse_number(token, "list_a") for token in _tokens(list_a_text)],
        list_b=[_parse_number(token, "list_b") for token in _tokens(list_b_text)],
        join_a=_parse_optional_int(join_a_text, "join_a"),
        join_b=_parse_optional_int(join_b_text, "join_b"),
    )


def parse_random_list(text: str) -> RandomListInput:
    """Parse ``[[value, random_index | null], ...]`` JSON."""
    if not text.strip():
        return RandomListInput()
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise InputValidationError("entries", f"invalid JSON: {exc.msg}") from exc
    except RecursionError as exc:
        raise InputValidationError("entries", "JSON is nested too deeply") from exc
    if not isinstance(data, list):
        raise InputValidationError("entries", "expected a JSON array of pairs")

    entries: list[tuple[Number, int | None]] = []
    for position, item in enumerate(data):
        if not isinstance(item, list) or len(item) != 2:
            raise InputValidationError(
                "entries", f"entry {position} must be a [value, random] pair"
            )
        value, target = item
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise InputValidationError("entries", f"entry {position}: value must be a number")
        if isinstance(value, int) and abs(value) > sys.float_info.max:
            raise InputValidationError("entries", f"entry {position}: value is out of range")
        if not math.isfinite(value):
            raise InputValidationError("entries", f"entry {position}: value must be finite")
        if target is not None and (isinstance(target, bool) or not isinstance(target, int)):
            raise InputValidationError(
                "entries", f"entry {position}: random index must be an integer or null"
            )
        entries.append((value, target))
    return _build(RandomListInput, "entries", entries=entries)


# ── Dispatch by input kind ───────────────────────────────────────


def _normalize_tree(raw: Mapping[str, str], ceiling: int) -> TreeInput:
    return parse_tree(raw.get("tree", ""), ceiling=ceiling)


def _normalize_array(raw: Mapping[str, str], ceiling: int) -> ArrayInput:
    return parse_array(raw.get("values", ""), ceiling=ceiling)


_NORMALIZERS: dict[str, Callable[[Mapping[str, str], int], BaseModel]] = {
    constants.INPUT_TREE: _normalize_tree,
    constants.INPUT_ARRAY: _normalize_array,
    constants.INPUT_ROTATION: lambda raw, _: parse_rotation(
        raw.get("values", ""), raw.get("k", "")
    ),
    constants.INPUT_KTH: lambda raw, _: parse_kth(raw.get("tree", ""), raw.get("k", "")),
    constants.INPUT_CYCLE_LIST: lambda raw, _: parse_cycle_list(
        raw.get("values", ""), raw.get("pos", "")
    ),
    constants.INPUT_INTERSECTION: lambda raw, _: parse_intersection(
        raw.get("list_a", ""),
        raw.get("list_b", ""),
        raw.get("join_a", ""),
        raw.get("join_b", ""),
    ),
    constants.INPUT_RANDOM_LIST: lambda raw, _: parse_random_list(raw.get("entries", "")),
}


def normalize(kind: str, raw: Mapping[str, str], ceiling: int) -> BaseModel:
    """Normalize *raw* text fields for an input *kind*.

    Raises ``InputValidationError`` on bad input and ``ValueError`` for an
    unknown *kind*.
    """
    normalizer = _NORMALIZERS.get(kind)
    if normalizer is None:
        raise ValueError(f"Unknown input kind: {kind}")
    normalized = normalizer(raw, ceiling)
    logger.debug("Normalized %s input: %s", kind, normalized)
    return normalized
