"""Built-in menu shown whenever the active backend has no active products."""
from typing import List

from ..schemas.product_models import Product

_SEED = [
    ("Classic Chocolate Truffle", "Birthday", "₹800 - ₹2,500", "photo-1578985545062-69928b1d9587", "Rich dark chocolate layers with velvety ganache."),
    ("Red Velvet Dream", "Wedding", "₹1,200 - ₹4,000", "photo-1616541823729-00fe0aacd32c", "Vibrant red sponge with cream cheese frosting."),
    ("Vanilla Bean Elegance", "Anniversary", "₹700 - ₹2,000", "photo-1535141192574-5d4897c12636", "Light and fluffy vanilla sponge with fresh cream."),
    ("Fondant Fantasy", "Custom", "₹2,000 - ₹8,000", "photo-1558961363-fa8fdf82db35", "Fully customizable fondant cakes for any theme."),
    ("Strawberry Bliss", "Birthday", "₹900 - ₹3,000", "photo-1621303837174-89787a7d4729", "Fresh strawberry sponge with whipped cream layers."),
    ("Butterscotch Crunch", "Anniversary", "₹750 - ₹2,200", "photo-1563729784474-d77dbb933a9e", "Caramel butterscotch with crunchy praline topping."),
    ("Pineapple Delight", "Birthday", "₹600 - ₹1,800", "photo-1464349095431-e9a21285b5f3", "Tropical pineapple sponge with cherry garnish."),
    ("Black Forest", "Custom", "₹850 - ₹2,800", "photo-1606890737304-57a1ca8a5b62", "Classic chocolate with kirsch-soaked cherries and whipped cream."),
    ("Rose & Pistachio", "Wedding", "₹1,500 - ₹5,000", "photo-1519869325930-281384570c4e", "Delicate rosewater sponge with pistachio buttercream."),
]


def _image(photo: str) -> str:
    return f"https://images.unsplash.com/{photo}?auto=format&fit=crop&w=600&q=80"


DEFAULT_PRODUCTS: List[Product] = [
    Product(
        id=f"default-{i}",
        name=name,
        category=category,
        price_range=price_range,
        image_url=_image(photo),
        description=description,
        is_active=True,
        sort_order=i,
    )
    for i, (name, category, price_range, photo, description) in enumerate(_SEED, start=1)
]


def default_products() -> List[Product]:
    """Fresh copies, so callers can't mutate the shared seed list."""
    return [p.model_copy() for p in DEFAULT_PRODUCTS]
