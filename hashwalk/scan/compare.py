"""Set comparison of result mappings."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field


@dataclass(slots=True)
class MappingDiff:
    """Keys that differ between two result mappings."""

    missing: list[str] = field(default_factory=list)
    extra: list[str] = field(default_factory=list)
    changed: list[str] = field(default_factory=list)

    @property
    def identical(self) -> bool:
        return not (self.missing or self.extra or self.changed)

    def summary(self) -> str:
        if self.identical:
            return "mappings are identical"
        return (
            f"{len(self.missing)} missing, {len(self.extra)} extra, "
            f"{len(self.changed)} changed"
        )

    def to_dict(self) -> dict[str, list[str]]:
        return {"missing": self.missing, "extra": self.extra, "changed": self.changed}


def diff_mappings(left: Mapping[str, bytes], right: Mapping[str, bytes]) -> MappingDiff:
    """Compare ``right`` against ``left``.

    ``missing`` lists keys only in ``left``, ``extra`` keys only in ``right``
    and ``changed`` keys whose fingerprints differ. Each list is sorted.
    """
    left_keys = set(left)
    right_keys = set(right)
    return MappingDiff(
        missing=sorted(left_keys - right_keys),
        extra=sorted(right_keys - left_keys),
        changed=sorted(key for key in left_keys & right_keys if left[key] != right[key]),
    )
