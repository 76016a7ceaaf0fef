"""Balance and settlement models for the settlement engine.

All amounts are integers in minor currency units (cents). The models are
frozen: settlements are derived data, recomputed from balances on every read.
"""

from pydantic import BaseModel, ConfigDict, Field, StrictInt, computed_field


class PlayerRef(BaseModel):
    """Identity of a player as carried on a settlement."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str


class PlayerBalance(BaseModel):
    """A player's net result for one completed session.

    Positive ``net`` means the player is owed money, negative means
    the player owes money.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name: str
    net: StrictInt

    @property
    def ref(self) -> PlayerRef:
        return PlayerRef(id=self.id, name=self.name)


class Settlement(BaseModel):
    """A single directed payment from one player to another."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_: PlayerRef = Field(..., alias="from")
    to: PlayerRef
    amount: StrictInt = Field(..., gt=0)

    def to_dict(self) -> dict:
        """Serialize with the wire field name ``from``."""
        return self.model_dump(by_alias=True)


class SettlementDiagnostics(BaseModel):
    """Verification totals computed alongside a settlement list.

    ``unsettled`` is the delta between what creditors are owed and what
    the settlements actually move. It is zero whenever the input balances
    sum to zero.
    """

    total_credit: int
    total_debit: int
    total_settled: int
    imbalance: int
    unsettled: int
    residuals: dict[str, int] = Field(default_factory=dict)

    @computed_field
    @property
    def is_balanced(self) -> bool:
        return self.imbalance == 0


class SettlementReport(BaseModel):
    """Settlements for a session together with their diagnostics."""

    settlements: list[Settlement]
    diagnostics: SettlementDiagnostics
