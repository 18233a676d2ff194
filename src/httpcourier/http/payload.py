# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Structured payload container."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class PayloadPolicy:
    """Limits applied to structured payloads (0 disables a limit)."""

    max_keys: int = 0
    max_key_length: int = 0


class Payload:
    """Ordered key/value payload with string keys."""

    def __init__(self, initial: Mapping[str, Any] | None = None, policy: PayloadPolicy | None = None):
        self.policy = policy or PayloadPolicy()
        self._data: dict[str, Any] = {}
        if initial is None:
            return
        if isinstance(initial, Payload):
            initial = initial.to_dict()
        if not isinstance(initial, Mapping):
            raise ValueError(f"Payload must be a mapping, got {type(initial).__name__}")
        for key, value in initial.items():
            self.set(key, value)

    def set(self, key: str, value: Any) -> None:
        if not isinstance(key, str):
            raise ValueError(f"Invalid payload key: {key!r}")
        if self.policy.max_key_length and len(key) > self.policy.max_key_length:
            raise ValueError(f"Payload key exceeds {self.policy.max_key_length} characters")
        if key not in self._data and self.policy.max_keys and len(self._data) >= self.policy.max_keys:
            raise ValueError(f"Too many payload keys (limit {self.policy.max_keys})")
        self._data[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def has(self, key: str) -> bool:
        return key in self._data

    def count(self) -> int:
        return len(self._data)

    def to_dict(self) -> dict[str, Any]:
        return dict(self._data)

    def items(self) -> Iterator[tuple[str, Any]]:
        return iter(list(self._data.items()))

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._data))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Payload):
            return self._data == other._data
        if isinstance(other, Mapping):
            return self._data == dict(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"Payload({self._data!r})"


__all__ = ["Payload", "PayloadPolicy"]
