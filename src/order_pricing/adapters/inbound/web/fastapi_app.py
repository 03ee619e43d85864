from __future__ import annotations

import logging
from typing import Annotated, Any, Literal, Union

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from returns.result import Success

from order_pricing.core.domain.model.errors import PricingError, ValidationError
from order_pricing.core.domain.model.order import Unit
from order_pricing.core.ports.inbound.price_order import (
    PriceOrderCommand,
    PriceOrderLine,
    PriceOrderUseCase,
)

logger = logging.getLogger(__name__)

# ---- HTTP DTOs (adapter layer) ---------------------------------------------


class FixedDiscountIn(BaseModel):
    kind: Literal["fixed"]
    fraction: float = Field(ge=0, lt=1, examples=[0.1])


class VolumeDiscountIn(BaseModel):
    kind: Literal["volume"]
    min_quantity: float = Field(ge=0, examples=[10])
    fraction: float = Field(ge=0, lt=1, examples=[0.15])


class PriceThresholdDiscountIn(BaseModel):
    kind: Literal["price_threshold"]
    min_line_total: float = Field(ge=0, examples=[100])
    fraction: float = Field(ge=0, lt=1, examples=[0.05])


class AmountThresholdDiscountIn(BaseModel):
    kind: Literal["amount_threshold"]
    min_unit_price: float = Field(ge=0, examples=[100])
    fraction: float = Field(ge=0, lt=1, examples=[0.05])


DiscountIn = Annotated[
    Union[
        FixedDiscountIn,
        VolumeDiscountIn,
        PriceThresholdDiscountIn,
        AmountThresholdDiscountIn,
    ],
    Field(discriminator="kind"),
]


class QuoteLineIn(BaseModel):
    item_id: int = Field(examples=[2])
    name: str = Field(min_length=1, examples=["expensive pen"])
    unit_price: float = Field(ge=0, examples=[15])
    quantity: int = Field(ge=0, examples=[20])
    unit: Unit = Unit.PIECE
    item_discount: str | None = Field(None, examples=["ten"])
    line_discount: str | None = None


class QuoteRequest(BaseModel):
    order_id: int = Field(examples=[109])
    customer_name: str | None = Field(None, min_length=1, examples=["joane"])
    customer_discount: str | None = None
    order_discount: str | None = None
    lines: list[QuoteLineIn] = Field(default_factory=list)
    discounts: dict[str, DiscountIn] = Field(default_factory=dict)


class QuoteLineOut(BaseModel):
    item_id: int
    quantity: int
    gross: float
    net: float


class QuoteResponse(BaseModel):
    order_id: int
    customer_name: str | None
    subtotal: float
    total: float
    lines: list[QuoteLineOut]


class ErrorResponse(BaseModel):
    type: str
    message: str
    details: list[dict[str, Any]] | None = None


def _map_error_to_http(err: PricingError) -> tuple[int, ErrorResponse]:
    if isinstance(err, ValidationError):
        return 400, ErrorResponse(type=type(err).__name__, message=str(err))

    return 500, ErrorResponse(type=type(err).__name__, message=str(err))


def _to_command(req: QuoteRequest) -> PriceOrderCommand:
    return PriceOrderCommand(
        order_id=req.order_id,
        customer_name=req.customer_name,
        customer_discount=req.customer_discount,
        order_discount=req.order_discount,
        discounts={name: d.model_dump() for name, d in req.discounts.items()},
        lines=tuple(
            PriceOrderLine(
                item_id=ln.item_id,
                name=ln.name,
                unit_price=ln.unit_price,
                quantity=ln.quantity,
                unit=ln.unit.value,
                item_discount=ln.item_discount,
                line_discount=ln.line_discount,
            )
            for ln in req.lines
        ),
    )


def create_app(price_order_uc: PriceOrderUseCase) -> FastAPI:
    app = FastAPI(title="order_pricing")

    # --- exception handlers -------------------------------------------------

    @app.exception_handler(PricingError)
    async def handle_domain_error(_: Request, exc: PricingError) -> JSONResponse:
        status, body = _map_error_to_http(exc)
        return JSONResponse(status_code=status, content=body.model_dump())

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        _: Request, exc: RequestValidationError
    ) -> JSONResponse:
        body = ErrorResponse(
            type="RequestValidationError",
            message="invalid request",
            details=[
                {"loc": list(e.get("loc", ())), "msg": e.get("msg", "")}
                for e in exc.errors()
            ],
        )
        return JSONResponse(status_code=400, content=body.model_dump())

    @app.exception_handler(Exception)
    async def handle_unexpected(_: Request, exc: Exception) -> JSONResponse:
        logger.exception("unexpected error")
        body = ErrorResponse(type=type(exc).__name__, message="internal server error")
        return JSONResponse(status_code=500, content=body.model_dump())

    # --- routes --------------------------------------------------------------

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.post(
        "/quotes",
        response_model=QuoteResponse,
        responses={
            400: {"model": ErrorResponse},
            500: {"model": ErrorResponse},
        },
    )
    def quote(req: QuoteRequest) -> Any:
        result = price_order_uc.price_order(_to_command(req))

        if isinstance(result, Success):
            q = result.unwrap()
            return QuoteResponse(
                order_id=q.order_id,
                customer_name=q.customer_name,
                subtotal=q.subtotal,
                total=q.total,
                lines=[
                    QuoteLineOut(
                        item_id=lq.item_id,
                        quantity=lq.quantity,
                        gross=lq.gross,
                        net=lq.net,
                    )
                    for lq in q.lines
                ],
            )

        raise result.failure()

    return app
