"""VICS dialect profiles.

Everything that differs between 4010 and 5010 output lives in one table so
the generators never branch on the dialect literal directly.
"""

from dataclasses import dataclass
from decimal import Decimal

from vicsedi.edi.models import Dialect
from vicsedi.errors import UnsupportedDialectError


@dataclass(frozen=True)
class DialectProfile:
    """Version tokens and optional segment sets of one VICS dialect.

    Attributes:
        dialect: The dialect this profile describes.
        isa_version: ISA12 interchange control version emitted.
        gs_version: GS08 version/release code emitted.
        isa_token: Token an inbound ISA is expected to contain.
        gs_token: Token an inbound GS is expected to contain.
        emits_address_block: Whether N3/N4 follow the party N1 segment.
        emits_tax: Whether the invoice carries a TXI tax segment.
        tax_rate: Tax rate applied to the invoice subtotal.
    """

    dialect: Dialect
    isa_version: str
    gs_version: str
    isa_token: str
    gs_token: str
    emits_address_block: bool
    emits_tax: bool
    tax_rate: Decimal

    @property
    def label(self) -> str:
        return f"VICS {self.dialect.value}"


DIALECT_PROFILES: dict[Dialect, DialectProfile] = {
    Dialect.V4010: DialectProfile(
        dialect=Dialect.V4010,
        isa_version="00401",
        gs_version="004010VICS",
        isa_token="00401",
        gs_token="004010",
        emits_address_block=False,
        emits_tax=False,
        tax_rate=Decimal("0"),
    ),
    Dialect.V5010: DialectProfile(
        dialect=Dialect.V5010,
        isa_version="00501",
        gs_version="005010",
        isa_token="00501",
        gs_token="005010",
        emits_address_block=True,
        emits_tax=True,
        tax_rate=Decimal("0.08"),
    ),
}


def resolve_dialect(value: Dialect | str) -> Dialect:
    """Coerce a dialect literal to the enum.

    Raises:
        UnsupportedDialectError: For anything other than 4010 or 5010.
    """
    if isinstance(value, Dialect):
        return value
    try:
        return Dialect(str(value).strip())
    except ValueError:
        raise UnsupportedDialectError(value) from None


def get_profile(value: Dialect | str) -> DialectProfile:
    """Look up the profile for a dialect literal or enum member."""
    return DIALECT_PROFILES[resolve_dialect(value)]
