"""Storage backends for the product collection.

Every backend hands out and accepts the whole collection at once; there are
no partial reads or writes.
"""
from __future__ import annotations

import json
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Iterable, List, Optional, Protocol

from pydantic import ValidationError

from .schemas import Product, dump

logger = logging.getLogger(__name__)


class StorageUnavailable(Exception):
    """The backing document could not be read, parsed or written."""


class StorageWriteError(StorageUnavailable):
    """The collection could not be written back."""


class ProductStorage(Protocol):
    def load(self) -> List[Product]: ...

    def save(self, products: Iterable[Product]) -> None: ...


def parse_products(data: object) -> List[Product]:
    if not isinstance(data, list):
        raise StorageUnavailable("Product document must be a JSON array")
    try:
        return [Product.model_validate(item) for item in data]
    except ValidationError as exc:
        raise StorageUnavailable(f"Invalid product record: {exc}") from exc


class JsonFileStorage:
    """Products kept as a pretty-printed UTF-8 JSON array in a single file."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> List[Product]:
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except (OSError, json.JSONDecodeError) as exc:
            logger.error("Error reading products from %s: %s", self.path, exc)
            raise StorageUnavailable(f"Cannot read {self.path}") from exc
        return parse_products(data)

    def save(self, products: Iterable[Product]) -> None:
        payload = json.dumps([dump(p) for p in products], indent=2, ensure_ascii=False)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # Write next to the target and swap it in, so readers never see half a file.
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=self.path.parent)
        except OSError as exc:
            logger.error("Error writing products to %s: %s", self.path, exc)
            raise StorageWriteError(f"Cannot write {self.path}") from exc
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
                handle.write("\n")
            if self.path.exists():
                os.chmod(tmp_name, stat.S_IMODE(self.path.stat().st_mode))
            os.replace(tmp_name, self.path)
        except OSError as exc:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            logger.error("Error writing products to %s: %s", self.path, exc)
            raise StorageWriteError(f"Cannot write {self.path}") from exc


class InMemoryStorage:
    """Holds the collection in process memory; copies on the way in and out."""

    def __init__(self, products: Optional[Iterable[Product | dict]] = None) -> None:
        self._products: List[Product] = [
            p.model_copy(deep=True) if isinstance(p, Product) else Product.model_validate(p)
            for p in (products or [])
        ]
        self.saves = 0

    def load(self) -> List[Product]:
        return [p.model_copy(deep=True) for p in self._products]

    def save(self, products: Iterable[Product]) -> None:
        self._products = [p.model_copy(deep=True) for p in products]
        self.saves += 1
