from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Literal

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)

logger = logging.getLogger(__name__)


OrderStatus = Literal["new", "confirmed", "sent", "completed", "cancelled"]
OrderMode = Literal["create", "update"]
TaxMode = Literal["exempt", "standard"]
DiscountType = Literal["none", "percent", "fixed", "target_price"]
FnBPaymentMode = Literal[1, 2]
Action = Literal[
    "cancel",
    "save",
    "confirm",
    "send",
    "payment",
    "delete",
    "print_kitchen",
    "print_temporary",
    "add_product",
    "remove_product",
    "update_quantity",
]

TERMINAL_STATUSES = frozenset({"completed", "cancelled"})
ACTIONS: tuple[str, ...] = (
    "cancel",
    "save",
    "confirm",
    "send",
    "payment",
    "delete",
    "print_kitchen",
    "print_temporary",
    "add_product",
    "remove_product",
    "update_quantity",
)
PRODUCT_ACTIONS = frozenset({"add_product", "remove_product", "update_quantity"})

PAY_AT_COUNTER = 1
PAY_AT_TABLE = 2
BUSINESS_TYPE_FNB = 2

# Legacy numeric codes sent by the order API.
_LEGACY_DISCOUNT_TYPES: dict[str, DiscountType] = {
    "0": "none",
    "1": "percent",
    "2": "fixed",
    "3": "target_price",
    "targetprice": "target_price",
}
_LEGACY_TAX_MODES: dict[str, TaxMode] = {"0": "exempt", "1": "standard"}

_DATETIME = TypeAdapter(datetime)


def _aliases(*names: str) -> AliasChoices:
    return AliasChoices(*names)


def _flag(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes"}
    return value == 1 or value is True


def _coerce_tax_mode(value: Any, default: TaxMode) -> TaxMode:
    if value is None or value == "":
        return default
    text = str(value).strip().lower()
    if text in ("exempt", "standard"):
        return text  # type: ignore[return-value]
    return _LEGACY_TAX_MODES.get(text, "standard")


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class Customer(_Record):
    id: str | None = Field(default=None, validation_alias=_aliases("id", "customerId"))
    name: str | None = Field(default=None, validation_alias=_aliases("name", "customerName"))
    phone: str | None = Field(default=None, validation_alias=_aliases("phone", "phoneNumber"))
    address: str | None = None


class LineItem(_Record):
    id: str
    product_id: str | None = Field(default=None, validation_alias=_aliases("product_id", "productId"))
    name: str = Field(default="", validation_alias=_aliases("name", "productName"))
    quantity: int = Field(default=0, ge=0)
    price: float = Field(default=0, ge=0, description="unit price before VAT")
    vat_rate: int = Field(default=0, validation_alias=_aliases("vat_rate", "vatRate", "VAT", "vat"))
    price_incl_vat: float | None = Field(
        default=None,
        validation_alias=_aliases("price_incl_vat", "priceInclVat", "priceIncludeVAT"),
    )
    is_confirmed_to_kitchen: bool = Field(
        default=False,
        validation_alias=_aliases("is_confirmed_to_kitchen", "isConfirmedToKitchen", "isConfirm"),
    )
    note: str | None = None

    @field_validator("quantity", "price", mode="before")
    @classmethod
    def _zero_if_missing(cls, value: Any) -> Any:
        return 0 if value is None or value == "" else value

    @field_validator("vat_rate", mode="before")
    @classmethod
    def _default_vat(cls, value: Any) -> Any:
        return 0 if value is None or value == "" else value

    @field_validator("name", mode="before")
    @classmethod
    def _default_name(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("is_confirmed_to_kitchen", mode="before")
    @classmethod
    def _confirmed_flag(cls, value: Any) -> bool:
        return _flag(value)

    @property
    def pre_tax_total(self) -> float:
        return self.price * self.quantity


class VoucherDetail(_Record):
    vat_rate: int = Field(default=0, validation_alias=_aliases("vat_rate", "vatRate", "VAT", "vat"))
    discount_before_vat: float = Field(
        default=0,
        validation_alias=_aliases(
            "discount_before_vat", "discountBeforeVat", "DiscountBeforeVAT", "DiscountBefortVAT"
        ),
    )
    discount_after_vat: float = Field(
        default=0,
        validation_alias=_aliases("discount_after_vat", "discountAfterVat", "DiscountAfterVAT"),
    )

    @field_validator("vat_rate", "discount_before_vat", "discount_after_vat", mode="before")
    @classmethod
    def _zero_if_missing(cls, value: Any) -> Any:
        return 0 if value is None or value == "" else value


class Voucher(_Record):
    id: str | None = None
    code: str | None = None
    details: list[VoucherDetail] = Field(default_factory=list, validation_alias=_aliases("details", "Details"))

    @field_validator("details", mode="before")
    @classmethod
    def _no_details(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def before_vat_total(self) -> float:
        return sum(d.discount_before_vat for d in self.details)

    @property
    def after_vat_total(self) -> float:
        return sum(d.discount_after_vat for d in self.details)

    @property
    def vat_total(self) -> float:
        return sum(d.discount_after_vat - d.discount_before_vat for d in self.details)


class Discount(_Record):
    type: DiscountType = "none"
    amount: float = 0
    vat_rate_target: int = Field(default=0, validation_alias=_aliases("vat_rate_target", "vatRateTarget"))

    @field_validator("type", mode="before")
    @classmethod
    def _legacy_type(cls, value: Any) -> Any:
        if value is None or value == "":
            return "none"
        text = str(value).strip()
        if text in ("none", "percent", "fixed", "target_price"):
            return text
        return _LEGACY_DISCOUNT_TYPES.get(text.lower(), "none")

    @field_validator("amount", "vat_rate_target", mode="before")
    @classmethod
    def _zero_if_missing(cls, value: Any) -> Any:
        return 0 if value is None or value == "" else value


class Order(_Record):
    id: str | None = None
    code: str | None = None

    created_at: datetime | str | None = Field(
        default=None, validation_alias=_aliases("created_at", "createdAt", "createDate")
    )
    confirmed_at: datetime | str | None = Field(
        default=None, validation_alias=_aliases("confirmed_at", "confirmedAt", "confirmDate")
    )
    sent_at: datetime | str | None = Field(default=None, validation_alias=_aliases("sent_at", "sentAt", "sendDate"))
    received_at: datetime | str | None = Field(
        default=None, validation_alias=_aliases("received_at", "receivedAt", "receiveDate")
    )
    cancelled_at: datetime | str | None = Field(
        default=None, validation_alias=_aliases("cancelled_at", "cancelledAt", "cancelDate")
    )

    customer: Customer | None = None
    tax_mode: TaxMode = Field(default="standard", validation_alias=_aliases("tax_mode", "taxMode", "LoaiThue"))
    price_includes_vat: bool = Field(
        default=False, validation_alias=_aliases("price_includes_vat", "priceIncludesVat", "PriceIncludeVAT")
    )
    discount: Discount = Field(default_factory=Discount)
    voucher: Voucher | None = Field(default=None, validation_alias=_aliases("voucher", "Voucher"))
    auto_deduct_inventory_on_send: bool = Field(
        default=False,
        validation_alias=_aliases(
            "auto_deduct_inventory_on_send", "autoDeductInventoryOnSend", "tuDongXuatKhoBanHang"
        ),
    )
    allow_add_product: bool | None = Field(
        default=None, validation_alias=_aliases("allow_add_product", "allowAddProduct", "isAddProduct")
    )
    line_items: list[LineItem] = Field(
        default_factory=list, validation_alias=_aliases("line_items", "lineItems", "products")
    )

    @model_validator(mode="before")
    @classmethod
    def _fold_legacy_discount(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "discount" in data:
            return data
        legacy_keys = ("DiscountType", "Discount", "DiscountVAT")
        if not any(key in data for key in legacy_keys):
            return data
        folded = dict(data)
        folded["discount"] = {
            "type": data.get("DiscountType"),
            "amount": data.get("Discount"),
            "vat_rate_target": data.get("DiscountVAT"),
        }
        return folded

    @field_validator("created_at", "confirmed_at", "sent_at", "received_at", "cancelled_at", mode="before")
    @classmethod
    def _lenient_timestamp(cls, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        text = value.strip()
        if not text:
            return None
        try:
            return _DATETIME.validate_python(text)
        except ValidationError:
            # the stage is still reached; only its time is unknown
            logger.warning("keeping unparsed timestamp %r", text)
            return text

    @field_validator("tax_mode", mode="before")
    @classmethod
    def _legacy_tax_mode(cls, value: Any) -> TaxMode:
        return _coerce_tax_mode(value, default="standard")

    @field_validator("price_includes_vat", "auto_deduct_inventory_on_send", mode="before")
    @classmethod
    def _restrictive_flag(cls, value: Any) -> bool:
        return _flag(value)

    @field_validator("allow_add_product", mode="before")
    @classmethod
    def _optional_flag(cls, value: Any) -> bool | None:
        return None if value is None else _flag(value)

    @field_validator("discount", mode="before")
    @classmethod
    def _no_discount(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("line_items", mode="before")
    @classmethod
    def _no_items(cls, value: Any) -> Any:
        return [] if value is None else value


class FnBConfig(_Record):
    business_type: int = Field(
        default=BUSINESS_TYPE_FNB, validation_alias=_aliases("business_type", "businessType", "LoaiHinhKinhDoanh")
    )
    fnb_payment_mode: FnBPaymentMode = Field(
        default=PAY_AT_COUNTER, validation_alias=_aliases("fnb_payment_mode", "fnbPaymentMode", "LoaiFnB")
    )
    tax_mode: TaxMode = Field(default="exempt", validation_alias=_aliases("tax_mode", "taxMode", "LoaiThue"))

    @field_validator("business_type", mode="before")
    @classmethod
    def _business_type(cls, value: Any) -> Any:
        return BUSINESS_TYPE_FNB if value is None or value == "" else value

    @field_validator("fnb_payment_mode", mode="before")
    @classmethod
    def _payment_mode(cls, value: Any) -> int:
        try:
            mode = int(value)
        except (TypeError, ValueError):
            return PAY_AT_COUNTER
        return mode if mode in (PAY_AT_COUNTER, PAY_AT_TABLE) else PAY_AT_COUNTER

    @field_validator("tax_mode", mode="before")
    @classmethod
    def _legacy_tax_mode(cls, value: Any) -> TaxMode:
        return _coerce_tax_mode(value, default="exempt")
