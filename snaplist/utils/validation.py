from ..exceptions import ValidationError


def parse_quantity(value, minimum=None) -> int:
    """
    Read a whole-number quantity from request data.

    Accepts ints, integral floats (``2.0``) and integer strings (``"2"``).
    Fractions, booleans and anything else raise ValidationError.
    """
    if isinstance(value, bool):
        raise ValidationError("Quantity must be an integer", field="quantity")

    if isinstance(value, int):
        quantity = value
    elif isinstance(value, float) and value.is_integer():
        quantity = int(value)
    elif isinstance(value, str) and value.strip().lstrip("+-").isdigit():
        quantity = int(value.strip())
    else:
        raise ValidationError("Quantity must be an integer", field="quantity")

    if minimum is not None and quantity < minimum:
        raise ValidationError(f"Quantity must be at least {minimum}", field="quantity")
    return quantity
