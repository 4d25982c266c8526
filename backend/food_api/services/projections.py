"""
ORM entity -> output schema builders.

Projections reference parents by id (plus a display name where the
client needs one) and never embed the parent aggregate.
"""

from food_shared.utils.schemas import (
    AddressOutput,
    CartFoodRef,
    CartItemOutput,
    CartOutput,
    ContactInformation,
    FavoriteOutput,
    FoodOutput,
    IngredientCategoryOutput,
    IngredientRef,
    OrderItemOutput,
    OrderOutput,
    RestaurantOutput,
    UserOutput,
)
from food_api.models import (
    Address,
    Cart,
    Favorite,
    Food,
    IngredientCategory,
    Order,
    Restaurant,
    User,
)


def user_output(user: User) -> UserOutput:
    return UserOutput(id=user.id, email=user.email, full_name=user.full_name, role=user.role)


def address_output(address: Address | None) -> AddressOutput | None:
    if address is None:
        return None
    return AddressOutput.model_validate(address)


def cart_output(cart: Cart) -> CartOutput:
    items = []
    for line in cart.items:
        food = line.food
        items.append(
            CartItemOutput(
                id=line.id,
                food=CartFoodRef(
                    id=food.id,
                    name=food.name,
                    price=food.price,
                    restaurant_id=food.restaurant_id,
                ),
                quantity=line.quantity,
                customizations=list(line.customizations or []),
                unit_price=line.unit_price,
                line_total=line.line_total,
            )
        )
    return CartOutput(id=cart.id, customer_id=cart.customer_id, items=items, total=cart.total)


def order_output(order: Order) -> OrderOutput:
    return OrderOutput(
        id=order.id,
        customer_id=order.customer_id,
        restaurant_id=order.restaurant_id,
        restaurant_name=order.restaurant.name,
        total_amount=order.total_amount,
        status=order.status,
        created_at=order.created_at,
        delivery_address=address_output(order.delivery_address),
        items=[
            OrderItemOutput(
                id=item.id,
                food_id=item.food_id,
                food_name=item.food_name,
                quantity=item.quantity,
                unit_price=item.unit_price,
                customizations=list(item.customizations or []),
                line_total=item.line_total,
            )
            for item in order.items
        ],
        total_item_count=order.total_item_count,
    )


def restaurant_output(restaurant: Restaurant) -> RestaurantOutput:
    contact = None
    if restaurant.contact_information:
        contact = ContactInformation.model_validate(restaurant.contact_information)
    return RestaurantOutput(
        id=restaurant.id,
        owner_id=restaurant.owner_id,
        name=restaurant.name,
        description=restaurant.description,
        cuisine_type=restaurant.cuisine_type,
        opening_hours=restaurant.opening_hours,
        open=restaurant.open,
        images=list(restaurant.images or []),
        address=address_output(restaurant.address),
        contact_information=contact,
        created_at=restaurant.created_at,
    )


def favorite_output(favorite: Favorite) -> FavoriteOutput:
    return FavoriteOutput.model_validate(favorite)


def food_output(food: Food) -> FoodOutput:
    return FoodOutput(
        id=food.id,
        name=food.name,
        description=food.description,
        price=food.price,
        restaurant_id=food.restaurant_id,
        category_id=food.category_id,
        category_name=food.category.name,
        available=food.available,
        vegetarian=food.vegetarian,
        seasonal=food.seasonal,
        images=list(food.images or []),
        ingredients=[IngredientRef.model_validate(item) for item in food.ingredients],
        created_at=food.created_at,
    )


def ingredient_category_output(category: IngredientCategory) -> IngredientCategoryOutput:
    return IngredientCategoryOutput(
        id=category.id,
        name=category.name,
        restaurant_id=category.restaurant_id,
        items=[IngredientRef.model_validate(item) for item in category.items],
    )
