"""Interchange envelope construction.

A TransactionBuilder collects the body segments of one transaction set and
wraps them in ISA/GS/ST ... SE/GE/IEA. The SE segment count is derived from
the collected list, so conditional segments can never drift from it.
"""

import logging
from dataclasses import dataclass
from datetime import datetime

from vicsedi.edi.dialects import DialectProfile
from vicsedi.edi.models import Address, EDITransactionType, Party, Segment
from vicsedi.edi.tokenizer import has_delimiter, untokenize
from vicsedi.errors import FormatError

logger = logging.getLogger(__name__)

TRANSACTION_CONTROL_NUMBER = "0001"


@dataclass(frozen=True)
class EnvelopeSettings:
    """Trading-partner identifiers stamped on every interchange."""

    sender_id: str = "SENDERID"
    receiver_id: str = "RECEIVERID"
    usage_indicator: str = "T"  # T = test, P = production


@dataclass(frozen=True)
class TransactionKind:
    """Envelope constants for one outbound transaction set."""

    transaction_type: EDITransactionType
    functional_code: str  # GS01
    control_number: int  # ISA13 / GS06


ASN_856 = TransactionKind(EDITransactionType.X12_856, "SH", 1)
INVOICE_810 = TransactionKind(EDITransactionType.X12_810, "IN", 2)


def edi_date(moment: datetime) -> str:
    """CCYYMMDD date used by GS, BSN and BIG."""
    return moment.strftime("%Y%m%d")


def edi_time(moment: datetime) -> str:
    """HHMM time used by ISA, GS and BSN."""
    return moment.strftime("%H%M")


class TransactionBuilder:
    """Accumulates one transaction set and frames it as an interchange.

    Example:
        >>> builder = TransactionBuilder(ASN_856, profile, now)
        >>> builder.add("BSN", "00", "ASN-1", "20250115", "1200", "0001")
        >>> text = builder.render()
    """

    def __init__(
        self,
        kind: TransactionKind,
        profile: DialectProfile,
        moment: datetime,
        envelope: EnvelopeSettings | None = None,
    ) -> None:
        self.kind = kind
        self.profile = profile
        self.moment = moment
        self.envelope = envelope or EnvelopeSettings()
        self._body: list[Segment] = []

    def add(self, tag: str, *elements: object) -> None:
        """Append a body segment. ``None`` elements become empty strings.

        Raises:
            FormatError: If an element contains a segment or element delimiter.
        """
        values = tuple("" if e is None else str(e) for e in elements)
        for position, value in enumerate(values, start=1):
            if has_delimiter(value):
                raise FormatError(
                    f"{tag}{position:02d} contains a reserved delimiter: '{value}'"
                )
        self._body.append(Segment(tag=tag, elements=values))

    def add_party(self, entity_code: str, party: Party) -> None:
        """Append N1 and, where the dialect carries one, the N3/N4 address block."""
        self.add("N1", entity_code, party.name, "9", party.id)
        if self.profile.emits_address_block and party.address is not None:
            self._add_address(party.address)

    def _add_address(self, address: Address) -> None:
        if address.street:
            self.add("N3", address.street)
        if address.has_city_line:
            self.add("N4", address.city, address.state, address.zip)

    @property
    def body(self) -> list[Segment]:
        return list(self._body)

    def transaction_segments(self) -> list[Segment]:
        """ST, the body, and SE carrying the count of ST..SE inclusive."""
        st = Segment(
            tag="ST",
            elements=(self.kind.transaction_type.value, TRANSACTION_CONTROL_NUMBER),
        )
        count = len(self._body) + 2
        se = Segment(tag="SE", elements=(str(count), TRANSACTION_CONTROL_NUMBER))
        return [st, *self._body, se]

    def segments(self) -> list[Segment]:
        """The complete interchange, ISA through IEA."""
        control = str(self.kind.control_number)
        isa_control = f"{self.kind.control_number:09d}"
        isa = Segment(
            tag="ISA",
            elements=(
                "00",
                " " * 10,
                "00",
                " " * 10,
                "ZZ",
                f"{self.envelope.sender_id:<15}",
                "ZZ",
                f"{self.envelope.receiver_id:<15}",
                self.moment.strftime("%y%m%d"),
                edi_time(self.moment),
                "U",
                self.profile.isa_version,
                isa_control,
                "0",
                self.envelope.usage_indicator,
                ">",
            ),
        )
        gs = Segment(
            tag="GS",
            elements=(
                self.kind.functional_code,
                self.envelope.sender_id,
                self.envelope.receiver_id,
                edi_date(self.moment),
                edi_time(self.moment),
                control,
                "X",
                self.profile.gs_version,
            ),
        )
        ge = Segment(tag="GE", elements=("1", control))
        iea = Segment(tag="IEA", elements=("1", isa_control))
        return [isa, gs, *self.transaction_segments(), ge, iea]

    def render(self) -> str:
        segments = self.segments()
        logger.debug(
            "%s transaction: %d segment(s) in ST..SE",
            self.kind.transaction_type.value,
            len(self._body) + 2,
        )
        return untokenize(segments)
