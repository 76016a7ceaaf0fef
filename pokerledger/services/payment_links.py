"""Payment deep links for settlements.

Builds the pay / request links that hand a settlement off to the
payment app. Handles are looked up by player id; the link always
targets the counterparty of the player viewing the settlement.
"""

import logging
import re
from enum import StrEnum
from typing import Mapping, Optional, Sequence
from urllib.parse import quote

from pydantic import BaseModel

from pokerledger.config import settings
from pokerledger.models.balance import PlayerRef, Settlement

logger = logging.getLogger("pokerledger.services.payment_links")

_HANDLE_RE = re.compile(r"[\w.-]+", re.ASCII)


class PaymentLinkError(ValueError):
    """Base class for errors building a payment link."""


class MissingPaymentHandleError(PaymentLinkError):
    """The counterparty has no payment handle on file."""

    def __init__(self, player: PlayerRef) -> None:
        self.player = player
        super().__init__(
            f"No payment handle saved for {player.name or player.id}"
        )


class InvalidPaymentHandleError(PaymentLinkError):
    """A payment handle is empty after normalization."""


class PaymentAction(StrEnum):
    """Transaction type understood by the payment app."""
    PAY = "pay"
    CHARGE = "charge"


class PaymentLink(BaseModel):
    """A ready-to-open deep link for one settlement."""

    url: str
    action: PaymentAction
    counterparty: PlayerRef
    amount: int


def normalize_handle(raw: str) -> str:
    """Strip whitespace and one leading ``@`` from a payment handle.

    The remaining handle may only contain ASCII letters, digits, ``_``, ``.``
    and ``-``.
    """
    handle = (raw or "").strip().removeprefix("@")
    if not handle:
        raise InvalidPaymentHandleError("Payment handle must not be empty")
    if not _HANDLE_RE.fullmatch(handle):
        raise InvalidPaymentHandleError(f"Invalid payment handle format: {handle!r}")
    return handle


def format_amount(amount: int) -> str:
    """Format minor units as a plain decimal string, e.g. 1250 -> '12.50'."""
    sign = "-" if amount < 0 else ""
    cents = abs(amount)
    return f"{sign}{cents // 100}.{cents % 100:02d}"


def build_payment_link(
    settlement: Settlement,
    handles: Mapping[str, str],
    *,
    viewer_id: Optional[str] = None,
    note: Optional[str] = None,
) -> PaymentLink:
    """Build the deep link for settling ``settlement``.

    When the viewer is the payee, the link requests the money from the
    payer. Otherwise it pays the payee.

    Args:
        settlement: The settlement to hand off.
        handles: Payment handles keyed by player id.
        viewer_id: Id of the player opening the link, if known.
        note: Payment note; defaults to ``settings.PAYMENT_NOTE``.

    Raises:
        MissingPaymentHandleError: The counterparty has no handle.
        InvalidPaymentHandleError: The counterparty's handle is blank.
    """
    if viewer_id is not None and viewer_id == settlement.to.id:
        action = PaymentAction.CHARGE
        counterparty = settlement.from_
    else:
        action = PaymentAction.PAY
        counterparty = settlement.to

    raw_handle = handles.get(counterparty.id)
    if raw_handle is None:
        raise MissingPaymentHandleError(counterparty)
    handle = normalize_handle(raw_handle)

    note_text = settings.PAYMENT_NOTE if note is None else note
    url = (
        f"{settings.PAYMENT_LINK_BASE_URL}/{quote(handle, safe='')}"
        f"?txn={action.value}"
        f"&note={quote(note_text, safe='')}"
        f"&amount={format_amount(settlement.amount)}"
    )

    logger.debug(
        "Built %s link for %s -> %s (%d)",
        action.value,
        settlement.from_.id,
        settlement.to.id,
        settlement.amount,
    )
    return PaymentLink(
        url=url,
        action=action,
        counterparty=counterparty,
        amount=settlement.amount,
    )


def settlements_for_player(
    settlements: Sequence[Settlement], player_id: str
) -> list[Settlement]:
    """Return the settlements a player pays or receives, in original order."""
    return [
        s for s in settlements
        if s.from_.id == player_id or s.to.id == player_id
    ]
