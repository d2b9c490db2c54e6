"""
Request body models for the JSON API
"""
from decimal import Decimal
from typing import Annotated, List, Optional

from flask import request
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from storefront.errors import ValidationError
from storefront.models import MAX_INTEGER


# Bounds of the Integer and Numeric(10, 2) columns
Identifier = Annotated[int, Field(gt=0, le=MAX_INTEGER)]
Quantity = Annotated[int, Field(ge=0, le=MAX_INTEGER)]
Amount = Annotated[Decimal, Field(ge=0, max_digits=10, decimal_places=2)]


class RequestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)


class OrderLineRequest(RequestModel):
    product_id: Identifier = Field(alias='productId')
    quantity: int = Field(gt=0, le=MAX_INTEGER)
    price: Amount


class OrderCreateRequest(RequestModel):
    """Request model for public checkout"""
    customer_name: str = Field(default='', alias='customerName')
    customer_email: str = Field(default='', alias='customerEmail')
    items: List[OrderLineRequest] = Field(default_factory=list)
    total_amount: Amount = Field(alias='totalAmount')


class OrderStatusRequest(RequestModel):
    status: str


class CheckoutRequest(RequestModel):
    """Customer identity for checking out the session cart"""
    customer_name: str = Field(default='', alias='customerName')
    customer_email: str = Field(default='', alias='customerEmail')


class CartChangeRequest(RequestModel):
    delta: int = Field(ge=-MAX_INTEGER, le=MAX_INTEGER)


class CategoryCreateRequest(RequestModel):
    name: str
    slug: str
    description: Optional[str] = None


class ProductCreateRequest(RequestModel):
    name: str
    description: Optional[str] = None
    price: Amount
    quantity: Quantity = 0
    category_id: Optional[Identifier] = Field(default=None, alias='categoryId')
    image_url: Optional[str] = Field(default=None, alias='imageUrl')


class ProductUpdateRequest(RequestModel):
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Amount] = None
    quantity: Optional[Quantity] = None
    category_id: Optional[Identifier] = Field(default=None, alias='categoryId')
    image_url: Optional[str] = Field(default=None, alias='imageUrl')
    is_active: Optional[bool] = Field(default=None, alias='isActive')


class RegisterRequest(RequestModel):
    username: str
    email: str
    password: str


class LoginRequest(RequestModel):
    email: str
    password: str


def request_payload():
    """JSON body, falling back to form fields for browser form posts"""
    data = request.get_json(silent=True)
    if data is None:
        data = request.form.to_dict()
    return data


def parse_request(model, data=None):
    if data is None:
        data = request_payload()
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        problems = '; '.join(
            f'{".".join(str(part) for part in error["loc"])}: {error["msg"]}'
            for error in e.errors()
        )
        raise ValidationError(f'Invalid request data: {problems}') from e
