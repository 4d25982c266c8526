"""
Shared Pydantic schemas used across the application.

Output models are read-side projections: they reference related
entities by id (and a display name where useful), never by embedding
the parent aggregate.
"""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

from food_shared.config.constants import ErrorMessages, Limits, OrderStatus, Role
from food_shared.utils.validators import normalize_customizations, validate_image_url


def _validate_images(images: list[str]) -> list[str]:
    return [validate_image_url(url) for url in images]


# =============================================================================
# User Schemas
# =============================================================================


class SignupRequest(BaseModel):
    """Register a new user (a cart is created with the account)."""

    email: EmailStr
    full_name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    role: Role = Role.CUSTOMER

    @field_validator("role")
    @classmethod
    def check_role(cls, value: Role) -> Role:
        # Admin accounts are provisioned out of band
        if value == Role.ADMIN:
            raise ValueError(ErrorMessages.ADMIN_SIGNUP_FORBIDDEN)
        return value


class UserOutput(BaseModel):
    id: int
    email: str
    full_name: str
    role: Role


class SignupResponse(BaseModel):
    """Signup response with an access token for the new user."""

    access_token: str
    token_type: str = "Bearer"
    user: UserOutput


# =============================================================================
# Address Schemas
# =============================================================================


class AddressInput(BaseModel):
    """
    Delivery address payload.

    When ``id`` names an address already in the customer's address book it
    is reused as-is; otherwise a new address is stored.
    """

    id: int | None = None
    street: str = Field(min_length=1, max_length=255)
    city: str = Field(min_length=1, max_length=120)
    state: str = Field(min_length=1, max_length=120)


class AddressOutput(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    street: str
    city: str
    state: str


# =============================================================================
# Cart Schemas
# =============================================================================


class AddCartItemRequest(BaseModel):
    food_id: int
    quantity: int = Field(ge=Limits.MIN_QUANTITY, le=Limits.MAX_QUANTITY)
    customizations: list[str] = Field(default_factory=list, max_length=Limits.MAX_CUSTOMIZATIONS)

    @field_validator("customizations")
    @classmethod
    def normalize(cls, value: list[str]) -> list[str]:
        for item in value:
            if len(item) > Limits.MAX_CUSTOMIZATION_LENGTH:
                raise ValueError("Personalización demasiado larga")
        return normalize_customizations(value)


class UpdateCartItemRequest(BaseModel):
    """Quantity of zero or less removes the line."""

    quantity: int = Field(le=Limits.MAX_QUANTITY)


class CartFoodRef(BaseModel):
    id: int
    name: str
    price: int
    restaurant_id: int


class CartItemOutput(BaseModel):
    id: int
    food: CartFoodRef
    quantity: int
    customizations: list[str]
    unit_price: int
    line_total: int


class CartOutput(BaseModel):
    id: int
    customer_id: int
    items: list[CartItemOutput]
    total: int


# =============================================================================
# Order Schemas
# =============================================================================


class CheckoutRequest(BaseModel):
    restaurant_id: int
    delivery_address: AddressInput


class OrderItemOutput(BaseModel):
    id: int
    food_id: int
    food_name: str
    quantity: int
    unit_price: int
    customizations: list[str]
    line_total: int


class OrderOutput(BaseModel):
    id: int
    customer_id: int
    restaurant_id: int
    restaurant_name: str
    total_amount: int
    status: OrderStatus
    created_at: datetime
    delivery_address: AddressOutput | None = None
    items: list[OrderItemOutput]
    total_item_count: int


# =============================================================================
# Restaurant Schemas
# =============================================================================


class ContactInformation(BaseModel):
    email: EmailStr | None = None
    mobile: str | None = Field(default=None, max_length=40)
    twitter: str | None = Field(default=None, max_length=120)
    instagram: str | None = Field(default=None, max_length=120)


class RestaurantCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    description: str | None = Field(default=None, max_length=Limits.MAX_DESCRIPTION_LENGTH)
    cuisine_type: str | None = Field(default=None, max_length=100)
    address: AddressInput | None = None
    contact_information: ContactInformation | None = None
    opening_hours: str | None = Field(default=None, max_length=255)
    images: list[str] = Field(default_factory=list, max_length=Limits.MAX_IMAGES)

    @field_validator("images")
    @classmethod
    def check_images(cls, value: list[str]) -> list[str]:
        return _validate_images(value)


class RestaurantUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    description: str | None = Field(default=None, max_length=Limits.MAX_DESCRIPTION_LENGTH)
    cuisine_type: str | None = Field(default=None, max_length=100)
    contact_information: ContactInformation | None = None
    opening_hours: str | None = Field(default=None, max_length=255)
    images: list[str] | None = Field(default=None, max_length=Limits.MAX_IMAGES)

    @field_validator("images")
    @classmethod
    def check_images(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return None
        return _validate_images(value)


class RestaurantOutput(BaseModel):
    id: int
    owner_id: int
    name: str
    description: str | None = None
    cuisine_type: str | None = None
    opening_hours: str | None = None
    open: bool
    images: list[str]
    address: AddressOutput | None = None
    contact_information: ContactInformation | None = None
    created_at: datetime


class FavoriteOutput(BaseModel):
    """Snapshot of a restaurant captured when it was favorited."""

    model_config = {"from_attributes": True}

    restaurant_id: int
    title: str
    description: str | None = None
    images: list[str]
    created_at: datetime


# =============================================================================
# Menu Schemas
# =============================================================================


class CategoryCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)


class CategoryOutput(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    name: str
    restaurant_id: int


class FoodCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    description: str | None = Field(default=None, max_length=Limits.MAX_DESCRIPTION_LENGTH)
    price: int = Field(ge=Limits.MIN_PRICE, le=Limits.MAX_PRICE)
    category_id: int
    restaurant_id: int
    vegetarian: bool = False
    seasonal: bool = False
    images: list[str] = Field(default_factory=list, max_length=Limits.MAX_IMAGES)
    ingredient_ids: list[int] = Field(default_factory=list)

    @field_validator("images")
    @classmethod
    def check_images(cls, value: list[str]) -> list[str]:
        return _validate_images(value)


class FoodPriceUpdateRequest(BaseModel):
    price: int = Field(ge=Limits.MIN_PRICE, le=Limits.MAX_PRICE)


class IngredientRef(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    name: str
    in_stock: bool


class FoodOutput(BaseModel):
    id: int
    name: str
    description: str | None = None
    price: int
    restaurant_id: int
    category_id: int
    category_name: str
    available: bool
    vegetarian: bool
    seasonal: bool
    images: list[str]
    ingredients: list[IngredientRef]
    created_at: datetime


class IngredientCategoryCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    restaurant_id: int


class IngredientItemCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=Limits.MAX_NAME_LENGTH)
    category_id: int
    restaurant_id: int


class IngredientItemOutput(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    name: str
    category_id: int
    restaurant_id: int
    in_stock: bool


class IngredientCategoryOutput(BaseModel):
    id: int
    name: str
    restaurant_id: int
    items: list[IngredientRef]
