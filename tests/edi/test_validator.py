"""Test structural validation of 850 X12, JSON purchase orders and the generation gates."""

import json
from decimal import Decimal

import pytest
from pydantic import ValidationError as PydanticValidationError

from vicsedi.edi.models import AsnItem, AsnRecord, Dialect, LineItem, Party, PurchaseOrder
from vicsedi.edi.validator import (
    REQUIRED_SEGMENTS,
    parse_asn_record,
    parse_purchase_order,
    require_generatable_po,
    require_invoiceable_asn,
    validate_po_json,
    validate_x12,
)
from vicsedi.errors import UnsupportedDialectError, ValidationError


class TestValidateX12:
    """Tests for raw 850 X12 validation."""

    def test_valid_4010(self, sample_850_4010):
        """The 4010 sample is valid with no warnings under 4010."""
        result = validate_x12(sample_850_4010, Dialect.V4010)
        assert result.valid is True
        assert result.errors == []
        assert result.warnings == []

    def test_valid_5010(self, sample_850_5010):
        """The 5010 sample is valid with no warnings under 5010."""
        result = validate_x12(sample_850_5010, "5010")
        assert result.valid is True
        assert result.warnings == []

    def test_version_mismatch_is_warning(self, sample_850_4010):
        """A 4010 interchange checked as 5010 warns but stays valid."""
        result = validate_x12(sample_850_4010, Dialect.V5010)
        assert result.valid is True
        assert "ISA version should be 00501 for VICS 5010" in result.warnings
        assert "GS version should be 005010 for VICS 5010" in result.warnings

    def test_empty_input_reports_everything(self):
        """Empty text fails every rule, not just the first one."""
        result = validate_x12("")
        assert result.valid is False
        assert "X12 must start with ISA segment" in result.errors
        for tag, description in REQUIRED_SEGMENTS.items():
            assert f"Missing {tag} ({description}) segment" in result.errors
        assert "Missing segment terminator (~)" in result.errors
        assert "Missing element delimiter (*)" in result.errors

    def test_missing_beg(self, sample_850_4010):
        """Dropping BEG is reported by name."""
        text = "\n".join(
            line for line in sample_850_4010.splitlines() if not line.startswith("BEG")
        )
        result = validate_x12(text)
        assert result.valid is False
        assert result.errors == ["Missing BEG (Beginning Segment for Purchase Order) segment"]

    def test_must_start_with_isa(self, sample_850_4010):
        """Leading garbage before ISA is an error."""
        result = validate_x12("XX*1~" + sample_850_4010)
        assert "X12 must start with ISA segment" in result.errors

    def test_missing_terminator(self):
        """Text without ~ is flagged along with the segments it hides."""
        result = validate_x12("ISA*00*00")
        assert result.valid is False
        assert "Missing segment terminator (~)" in result.errors
        assert "Missing element delimiter (*)" not in result.errors

    def test_no_po1_is_warning(self, sample_850_4010):
        """An 850 without line items is valid but warns."""
        text = "\n".join(
            line for line in sample_850_4010.splitlines() if not line.startswith("PO1")
        )
        result = validate_x12(text)
        assert result.valid is True
        assert "No PO1 (Purchase Order Line Item) segments found" in result.warnings

    def test_non_850_transaction_warns(self, sample_850_4010):
        """A transaction set other than 850 is accepted with a warning."""
        result = validate_x12(sample_850_4010.replace("ST*850*0001", "ST*860*0001"))
        assert result.valid is True
        assert any("expected 850" in w for w in result.warnings)

    def test_empty_tag_keeps_other_segments(self, sample_850_4010):
        """One malformed segment does not hide the segments around it."""
        result = validate_x12(sample_850_4010.replace("CTT*2~\n", "CTT*2~\n*X~\n"))
        assert result.valid is False
        assert result.errors == ["Segment 9 has an empty tag: '*X'"]
        assert result.warnings == []

    def test_unknown_dialect_rejected(self, sample_850_4010):
        """Only 4010 and 5010 are accepted."""
        with pytest.raises(UnsupportedDialectError):
            validate_x12(sample_850_4010, "6010")


class TestValidatePoJson:
    """Tests for JSON purchase order validation."""

    def test_valid_sample(self, sample_po_dict):
        """The sample PO has no errors or warnings."""
        result = validate_po_json(sample_po_dict)
        assert result.valid is True
        assert result.warnings == []

    def test_accepts_json_text(self, sample_po_dict):
        """JSON text is decoded before validation."""
        assert validate_po_json(json.dumps(sample_po_dict)).valid is True

    def test_invalid_json(self):
        """Undecodable text is a single error."""
        result = validate_po_json("{not json")
        assert result.valid is False
        assert len(result.errors) == 1
        assert result.errors[0].startswith("Invalid JSON format:")

    def test_not_an_object(self):
        """A JSON array is not a purchase order."""
        result = validate_po_json("[1, 2]")
        assert result.errors == ["Purchase order must be a JSON object"]

    def test_missing_fields_accumulate(self):
        """Missing poNumber and items are both reported."""
        result = validate_po_json({})
        assert result.errors == [
            "Missing required field: poNumber",
            "Missing or invalid field: items (must be an array)",
        ]
        assert "Missing shipTo information (will use default)" in result.warnings
        assert "Missing billTo information (will use shipTo as default)" in result.warnings

    def test_item_rules(self):
        """Item errors and warnings are numbered from 1."""
        result = validate_po_json(
            {
                "poNumber": "PO1",
                "shipTo": {"name": "A", "id": "1"},
                "billTo": {"name": "A", "id": "1"},
                "items": [
                    {"sku": "", "quantity": 0},
                    "not an item",
                    {"sku": "SKU2", "price": 1.0},
                ],
            }
        )
        assert result.errors == [
            "Item 1: Missing SKU",
            "Item 2: Must be an object",
            "Item 3: Missing quantity",
        ]
        assert result.warnings == [
            "Item 1: Quantity should be greater than 0",
            "Item 1: Missing price (required for invoice generation)",
        ]

    def test_zero_quantity_is_only_a_warning(self):
        """Zero quantity does not make the JSON invalid."""
        result = validate_po_json(
            {"poNumber": "PO1", "items": [{"sku": "A", "quantity": 0, "price": 1}]}
        )
        assert result.valid is True
        assert "Item 1: Quantity should be greater than 0" in result.warnings

    def test_blank_quantity_is_missing(self):
        """An empty string or false quantity counts as absent."""
        result = validate_po_json(
            {
                "poNumber": "PO1",
                "items": [
                    {"sku": "A", "quantity": "", "price": 1},
                    {"sku": "B", "quantity": False, "price": 1},
                ],
            }
        )
        assert result.errors == ["Item 1: Missing quantity", "Item 2: Missing quantity"]

    def test_numeric_string_quantities(self):
        """Numeric strings are compared by value; other text is an error."""
        result = validate_po_json(
            {
                "poNumber": "PO1",
                "items": [
                    {"sku": "A", "quantity": "0", "price": 1},
                    {"sku": "B", "quantity": "-5", "price": 1},
                    {"sku": "C", "quantity": "12", "price": 1},
                    {"sku": "D", "quantity": "lots", "price": 1},
                ],
            }
        )
        assert result.errors == ["Item 4: Quantity must be a number"]
        assert result.warnings[:2] == [
            "Item 1: Quantity should be greater than 0",
            "Item 2: Quantity should be greater than 0",
        ]

    def test_delimiter_in_field_is_error(self):
        """Values that would split a segment are rejected."""
        result = validate_po_json(
            {"poNumber": "PO*1", "items": [{"sku": "AB~CD", "quantity": 1, "price": 1}]}
        )
        assert result.errors == [
            "poNumber contains a reserved delimiter ('~' or '*')",
            "items[1].sku contains a reserved delimiter ('~' or '*')",
        ]

    def test_empty_items_warns(self):
        """An empty items array is a warning here, not an error."""
        result = validate_po_json({"poNumber": "PO1", "items": []})
        assert result.valid is True
        assert "Items array is empty" in result.warnings


class TestGenerationGates:
    """Tests for the strict gates applied before generation."""

    def test_parse_purchase_order(self, sample_po_dict):
        """A valid payload deserializes to a typed record."""
        po = parse_purchase_order(sample_po_dict)
        assert isinstance(po, PurchaseOrder)
        assert po.po_number == "PO123456"
        assert po.items[0].price == Decimal("25.5")

    def test_po_required(self):
        """Missing payload is rejected outright."""
        with pytest.raises(ValidationError, match="PO data is required"):
            parse_purchase_order(None)

    def test_po_errors_accumulate(self):
        """Every violated rule is in the one error."""
        with pytest.raises(ValidationError) as exc_info:
            parse_purchase_order(
                {"items": [{"sku": "A", "quantity": 0}, {"quantity": 1}, {"sku": "C"}]}
            )
        assert exc_info.value.errors == [
            "PO number is missing",
            "Item 1: Quantity must be greater than 0",
            "Item 2: Missing SKU",
            "Item 3: Missing quantity",
        ]

    def test_po_empty_items(self):
        """The gate needs at least one item."""
        with pytest.raises(ValidationError, match="at least one item"):
            parse_purchase_order({"poNumber": "PO1", "items": []})

    def test_po_schema_errors_are_validation_errors(self):
        """Type errors from deserialization surface as ValidationError."""
        with pytest.raises(ValidationError) as exc_info:
            parse_purchase_order({"poNumber": "PO1", "items": [{"sku": "A", "quantity": "lots"}]})
        assert any(message.startswith("items.0.quantity") for message in exc_info.value.errors)

    def test_po_delimiters_rejected(self):
        """SKUs and party fields may not carry ~ or *."""
        with pytest.raises(ValidationError) as exc_info:
            parse_purchase_order(
                {
                    "poNumber": "PO1",
                    "shipTo": {"name": "DC*1", "id": "1"},
                    "items": [{"sku": "AB~CD", "quantity": 1}],
                }
            )
        assert exc_info.value.errors == [
            "shipTo.name contains a reserved delimiter ('~' or '*')",
            "items[1].sku contains a reserved delimiter ('~' or '*')",
        ]

    def test_po_string_quantity_and_negative_price(self):
        """A quantity of "0" and a negative price are both gate errors."""
        with pytest.raises(ValidationError) as exc_info:
            parse_purchase_order(
                {
                    "poNumber": "PO1",
                    "items": [
                        {"sku": "A", "quantity": "0"},
                        {"sku": "B", "quantity": 1, "price": -10},
                    ],
                }
            )
        assert exc_info.value.errors == [
            "Item 1: Quantity must be greater than 0",
            "Item 2: Price must not be negative",
        ]

    def test_negative_price_not_representable(self):
        """LineItem itself refuses a negative price."""
        with pytest.raises(PydanticValidationError):
            LineItem(sku="A", quantity=1, price=Decimal("-0.01"))

    def test_asn_delimiters_rejected(self):
        """ASN and BOL numbers end up in BSN and REF elements."""
        with pytest.raises(ValidationError) as exc_info:
            parse_asn_record({"asnNumber": "ASN~1", "items": [{"sku": "A", "qty": 1}]})
        assert exc_info.value.errors == ["asnNumber contains a reserved delimiter ('~' or '*')"]

    def test_parse_asn_record(self, sample_asn):
        """An ASN dumped by alias parses back to the same record."""
        payload = sample_asn.model_dump(by_alias=True)
        assert parse_asn_record(payload) == sample_asn

    def test_asn_errors(self):
        """ASN items are labelled as ASN items."""
        with pytest.raises(ValidationError) as exc_info:
            parse_asn_record({"items": [{"sku": "", "qty": -1}]})
        assert exc_info.value.errors == [
            "ASN item 1: Missing SKU",
            "ASN item 1: Quantity must be greater than 0",
        ]

    def test_asn_required(self):
        """Missing payload is rejected outright."""
        with pytest.raises(ValidationError, match="ASN data is required"):
            parse_asn_record({})

    def test_typed_records_pass_through(self, sample_po, sample_asn):
        """Already typed records are checked, not re-parsed."""
        assert parse_purchase_order(sample_po) is sample_po
        assert parse_asn_record(sample_asn) is sample_asn

    def test_require_generatable_po(self):
        """Typed records still need positive quantities."""
        po = PurchaseOrder(po_number="PO1", items=[LineItem(sku="A", quantity=0)])
        with pytest.raises(ValidationError, match="Item 1: Quantity must be greater than 0"):
            require_generatable_po(po)

    def test_require_generatable_po_delimiters(self):
        """Typed records are checked for delimiters too."""
        po = PurchaseOrder(
            po_number="PO1",
            ship_to=Party(name="DC", id="1~2"),
            items=[LineItem(sku="A", quantity=1)],
        )
        with pytest.raises(ValidationError, match=r"shipTo\.id contains a reserved delimiter"):
            require_generatable_po(po)

    def test_require_invoiceable_asn(self):
        """A typed ASN without items cannot be invoiced."""
        asn = AsnRecord(
            asn_number="A", bol_number="B", po_number="P", ship_to=Party(name="X", id="1"), items=[]
        )
        with pytest.raises(ValidationError, match="at least one item"):
            require_invoiceable_asn(asn)

    def test_require_invoiceable_asn_quantity(self):
        """Zero shipped quantity is rejected."""
        asn = AsnRecord(
            asn_number="A",
            bol_number="B",
            po_number="P",
            ship_to=Party(name="X", id="1"),
            items=[AsnItem(sku="A", qty=0)],
        )
        with pytest.raises(ValidationError, match="ASN item 1"):
            require_invoiceable_asn(asn)
