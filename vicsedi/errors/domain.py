"""Typed domain exceptions for the EDI codec.

Each exception carries the registry code used when it is surfaced to a
caller, so the API and CLI layers can map failures without matching on
message strings.

Usage:
    # In codec / service layer
    raise ReconciliationError("SKU999")

    # In route handler
    try:
        document = generate_invoice_document(asn, po, dialect)
    except DomainError as e:
        return JSONResponse(status_code=400, content=error_payload(e))
"""


class DomainError(Exception):
    """Base exception for all domain errors."""

    code = "E-4001"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    @property
    def messages(self) -> list[str]:
        """Human-readable messages for display, one per violated rule."""
        return [self.message]

    @property
    def context(self) -> dict[str, object]:
        """Values for the registry message template."""
        return {"detail": self.message}


class FormatError(DomainError):
    """Raw input could not be framed into segments or parsed into a record."""

    code = "E-1001"


class ValidationError(DomainError):
    """Structural rule violations, accumulated rather than first-failure."""

    code = "E-2001"

    def __init__(self, messages: list[str] | str) -> None:
        if isinstance(messages, str):
            messages = [messages]
        self.errors = list(messages)
        super().__init__(", ".join(self.errors))

    @property
    def messages(self) -> list[str]:
        return list(self.errors)

    @property
    def context(self) -> dict[str, object]:
        return {"count": len(self.errors)}


class UnsupportedDialectError(ValidationError):
    """Dialect token is neither 4010 nor 5010."""

    code = "E-2003"

    def __init__(self, dialect: object) -> None:
        super().__init__(
            f"Unsupported VICS dialect '{dialect}'. Use '4010' or '5010'"
        )
        self.dialect = dialect

    @property
    def context(self) -> dict[str, object]:
        return {"dialect": self.dialect}


class ReconciliationError(DomainError):
    """ASN line item has no matching PO line item. Fatal for the invoice."""

    code = "E-2002"

    def __init__(self, sku: str) -> None:
        super().__init__(f"SKU {sku} from ASN not found in PO")
        self.sku = sku

    @property
    def context(self) -> dict[str, object]:
        return {"sku": self.sku}
