from typing import ClassVar, FrozenSet, Optional

from pydantic import BaseModel, ConfigDict, model_validator


class _ChainIdentifier(BaseModel):
    """
    Reference to a point in chain history as accepted by the beacon REST API.

    ``kind`` is one of the named references allowed for the concrete identifier,
    or ``"slot"`` / ``"root"`` in which case the matching field carries the value.
    """

    model_config = ConfigDict(frozen=True)

    NAMED: ClassVar[FrozenSet[str]] = frozenset()

    kind: str
    slot: Optional[int] = None
    root: Optional[str] = None

    @model_validator(mode="after")
    def _check_variant(self):
        if self.kind == "slot":
            if self.slot is None or self.slot < 0:
                raise ValueError("slot identifier requires a non-negative slot")
        elif self.kind == "root":
            if not self.root or not self.root.startswith("0x"):
                raise ValueError("root identifier requires a 0x-prefixed root")
        elif self.kind not in self.NAMED:
            raise ValueError(
                f"Unsupported {type(self).__name__} kind: {self.kind}. "
                f"Supported kinds: {sorted(self.NAMED | {'slot', 'root'})}"
            )
        return self

    @classmethod
    def named(cls, kind: str):
        return cls(kind=kind)

    @classmethod
    def at_slot(cls, slot: int):
        return cls(kind="slot", slot=slot)

    @classmethod
    def at_root(cls, root: str):
        return cls(kind="root", root=root)

    def __str__(self):
        """Render as the path segment used in REST routes."""
        if self.kind == "slot":
            return str(self.slot)
        if self.kind == "root":
            return self.root
        return self.kind


class StateId(_ChainIdentifier):
    NAMED: ClassVar[FrozenSet[str]] = frozenset(
        {"genesis", "finalized", "justified", "head"}
    )


class BlockId(_ChainIdentifier):
    NAMED: ClassVar[FrozenSet[str]] = frozenset({"genesis", "finalized", "head"})
