"""
Brand field-mapping table and center -> brand resolution.

Both are plain immutable lookups built once at startup and handed to the
grouping engine, so alternate tables can be swapped in per run.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional

from pydantic import ValidationError

from .errors import ConfigError, MappingNotFoundError
from .models import FieldMapping

DEFAULT_FIELD_MAPPINGS: Dict[str, Dict[str, Dict[str, int]]] = {
    "Bowlero": {
        "Retail": {"pref": 413, "center": 412, "unsub": 418},
        "League": {"pref": 415, "center": 414, "unsub": 418},
        "Group Event": {"pref": 417, "center": 416, "unsub": 418},
    },
    "AMF": {
        "Retail": {"pref": 406, "center": 405, "unsub": 411},
        "League": {"pref": 408, "center": 407, "unsub": 411},
        "Group Event": {"pref": 410, "center": 409, "unsub": 411},
    },
    "Lucky Strike": {
        "Retail": {"pref": 1064, "center": 1065, "unsub": 1084},
        "League": {"pref": 1082, "center": 1083, "unsub": 1084},
        "Group Event": {"pref": 1067, "center": 1068, "unsub": 1084},
    },
}


class BrandMappingTable:
    def __init__(self, table: Mapping[str, Mapping[str, FieldMapping]]) -> None:
        self._table = MappingProxyType(
            {brand: MappingProxyType(dict(categories)) for brand, categories in table.items()}
        )

    @classmethod
    def from_dict(cls, data: Mapping[str, Mapping[str, Mapping[str, Any]]]) -> "BrandMappingTable":
        """
        Build from the platform's `{brand: {category: {pref, center, unsub}}}` shape.

        A category entry missing any of the three codes is rejected outright.
        """
        table: Dict[str, Dict[str, FieldMapping]] = {}
        for brand, categories in data.items():
            if not isinstance(categories, Mapping):
                raise ConfigError(f"brand {brand!r} must map categories to field codes")
            table[brand] = {}
            for category, codes in categories.items():
                try:
                    table[brand][category] = FieldMapping.model_validate(codes)
                except ValidationError as exc:
                    raise ConfigError(
                        f"incomplete field mapping for {brand!r}/{category!r}: {exc.error_count()} error(s)"
                    ) from exc
        return cls(table)

    def brands(self) -> List[str]:
        return list(self._table)

    def categories(self, brand: str) -> List[str]:
        return list(self._table.get(brand, {}))

    def get(self, brand: str, category: str) -> Optional[FieldMapping]:
        return self._table.get(brand, {}).get(category)

    def lookup(self, brand: str, category: str) -> FieldMapping:
        mapping = self.get(brand, category)
        if mapping is None:
            raise MappingNotFoundError(brand, category)
        return mapping

    def __contains__(self, brand: object) -> bool:
        return brand in self._table


class CenterBrandMap:
    """Explicit center label -> brand lookup."""

    def __init__(self, centers: Mapping[str, str]) -> None:
        self._centers = MappingProxyType({k.strip(): v for k, v in centers.items()})

    @classmethod
    def from_brands(cls, brands: Iterable[str], aliases: Optional[Mapping[str, str]] = None) -> "CenterBrandMap":
        # Each brand name is listed as a center label for itself; aliases win.
        centers = {brand: brand for brand in brands}
        centers.update(aliases or {})
        return cls(centers)

    def resolve(self, center: str) -> Optional[str]:
        return self._centers.get(center.strip())

    def __len__(self) -> int:
        return len(self._centers)


def default_brand_table() -> BrandMappingTable:
    return BrandMappingTable.from_dict(DEFAULT_FIELD_MAPPINGS)
