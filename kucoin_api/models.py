import re
import uuid
from decimal import Decimal
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .utils import verify_ticker


def _ticker(v: str) -> str:
    v = v.upper().strip()
    if not verify_ticker(v):
        raise ValueError(f"Invalid symbol format: {v}")
    return v


def _decimal_string(v: Any) -> Any:
    """KuCoin expects decimal amounts as strings."""
    if v is None or isinstance(v, str):
        return v
    return format(Decimal(str(v)), "f")


class OrderRequest(BaseModel):
    """Body of a spot (HF) order placement."""

    client_oid: str = Field(
        default_factory=lambda: uuid.uuid4().hex,
        alias="clientOid",
        max_length=40,
    )
    symbol: str = Field(..., description="Trading pair, e.g. BTC-USDT")
    side: Literal["buy", "sell"]
    type: Literal["limit", "market"] = "limit"
    price: str | None = None
    size: str | None = None
    funds: str | None = None
    time_in_force: Literal["GTC", "GTT", "IOC", "FOK"] | None = Field(
        default=None, alias="timeInForce"
    )
    cancel_after: int | None = Field(default=None, alias="cancelAfter", gt=0)
    post_only: bool | None = Field(default=None, alias="postOnly")
    hidden: bool | None = None
    iceberg: bool | None = None
    visible_size: str | None = Field(default=None, alias="visibleSize")
    stp: Literal["CN", "CO", "CB", "DC"] | None = None
    remark: str | None = Field(default=None, max_length=20)
    tags: str | None = Field(default=None, max_length=20)

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("symbol")
    @classmethod
    def normalize_symbol(cls, v: str) -> str:
        """Normalize symbol to uppercase and check its format."""
        return _ticker(v)

    @field_validator("price", "size", "funds", "visible_size", mode="before")
    @classmethod
    def decimal_as_string(cls, v: Any) -> Any:
        return _decimal_string(v)

    @model_validator(mode="after")
    def check_order_shape(self) -> "OrderRequest":
        if self.type == "limit":
            if self.price is None or self.size is None:
                raise ValueError("Limit orders need both price and size")
            if self.funds is not None:
                raise ValueError("Limit orders do not accept funds")
        else:
            if (self.size is None) == (self.funds is None):
                raise ValueError("Market orders need exactly one of size or funds")
            if self.price is not None:
                raise ValueError("Market orders do not accept a price")
        if self.cancel_after is not None and self.time_in_force != "GTT":
            raise ValueError("cancelAfter only works with timeInForce GTT")
        if self.post_only and self.time_in_force in ("IOC", "FOK"):
            raise ValueError("postOnly cannot be used with timeInForce IOC or FOK")
        if self.hidden and self.iceberg:
            raise ValueError("An order is either hidden or iceberg")
        if self.iceberg and self.visible_size is None:
            raise ValueError("Iceberg orders need visibleSize")
        return self

    def to_body(self) -> dict[str, Any]:
        """JSON body with KuCoin field names, omitting unset fields."""
        return self.model_dump(by_alias=True, exclude_none=True)


class StopOrderRequest(OrderRequest):
    """Body of a stop order; the order is placed once the price reaches stopPrice."""

    stop_price: str = Field(..., alias="stopPrice")
    trade_type: Literal["TRADE", "MARGIN_TRADE", "MARGIN_ISOLATED_TRADE"] = Field(
        default="TRADE", alias="tradeType"
    )

    @field_validator("stop_price", mode="before")
    @classmethod
    def stop_price_as_string(cls, v: Any) -> Any:
        return _decimal_string(v)


class OcoOrderRequest(BaseModel):
    """
    Body of a one-cancels-the-other order.

    A limit order at ``price`` paired with a stop-limit order that triggers at
    ``stop_price`` and rests at ``limit_price``. Filling either cancels the other.
    """

    model_config = ConfigDict(populate_by_name=True)

    client_oid: str = Field(
        default_factory=lambda: uuid.uuid4().hex,
        alias="clientOid",
        max_length=40,
    )
    symbol: str
    side: Literal["buy", "sell"]
    price: str
    size: str
    stop_price: str = Field(..., alias="stopPrice")
    limit_price: str = Field(..., alias="limitPrice")
    remark: str | None = Field(default=None, max_length=20)
    trade_type: Literal["TRADE"] = Field(default="TRADE", alias="tradeType")

    @field_validator("symbol")
    @classmethod
    def normalize_symbol(cls, v: str) -> str:
        return _ticker(v)

    @field_validator("price", "size", "stop_price", "limit_price", mode="before")
    @classmethod
    def decimal_as_string(cls, v: Any) -> Any:
        return _decimal_string(v)

    def to_body(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


SUB_NAME_PATTERN = re.compile(r"^(?=.*[A-Za-z])(?=.*\d)[A-Za-z\d]{7,32}$")
SUB_PASSWORD_PATTERN = re.compile(r"^(?=.*[A-Za-z])(?=.*\d)[A-Za-z\d]{7,24}$")


class SubAccountRequest(BaseModel):
    """Body of a sub-account creation."""

    password: str
    sub_name: str = Field(..., alias="subName")
    access: Literal["Spot", "Futures", "Margin"]
    remarks: str | None = Field(default=None, min_length=1, max_length=24)

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        if not SUB_PASSWORD_PATTERN.match(v):
            raise ValueError("Password must be 7-24 characters of letters and numbers")
        return v

    @field_validator("sub_name")
    @classmethod
    def check_sub_name(cls, v: str) -> str:
        if not SUB_NAME_PATTERN.match(v):
            raise ValueError("subName must be 7-32 characters with letters and numbers")
        return v

    def to_body(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
