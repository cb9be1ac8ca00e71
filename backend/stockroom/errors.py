class StockroomError(Exception):
    pass


# --- validation ---


class ValidationFailed(StockroomError):
    field = None

    def __init__(self, message: str = None):
        super().__init__(message or self.__doc__)


class NameRequired(ValidationFailed):
    """product name is required"""

    field = "name"


class InvalidSize(ValidationFailed):
    """product size must be positive"""

    field = "size"


class InvalidPrice(ValidationFailed):
    """product price cannot be negative"""

    field = "price"


class InvalidCategory(ValidationFailed):
    field = "category"

    def __init__(self, category: str):
        self.category = category
        super().__init__(f"invalid product category: {category}")


class ProductIDRequired(ValidationFailed):
    """product ID is required for stock"""

    field = "product_id"


class NegativeQuantity(ValidationFailed):
    """stock cannot be negative"""

    field = "quantity"


class InvalidThreshold(ValidationFailed):
    field = "min_stock"

    def __init__(self, min_stock: int):
        self.min_stock = min_stock
        super().__init__(f"minimum stock cannot be negative: {min_stock}")


class InvalidMovementType(ValidationFailed):
    field = "movement_type"

    def __init__(self, movement_type: str):
        self.movement_type = movement_type
        super().__init__(f"invalid movement type: {movement_type}")


class NoQuantity(ValidationFailed):
    """movement must have boxes or units"""

    field = "quantity"


class NoPerformer(ValidationFailed):
    """performed_by is required"""

    field = "performed_by"


# --- lookup / state ---


class NotFound(StockroomError):
    what = "record"

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"{self.what} not found: {product_id}")


class ProductNotFound(NotFound):
    what = "product"


class StockNotFound(NotFound):
    what = "stock"


class AlreadyExists(StockroomError):
    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"product already exists: {product_id}")


class InsufficientStock(StockroomError):
    def __init__(self, boxes: int, units: int):
        # would-be quantities, not the current ones
        self.boxes = boxes
        self.units = units
        super().__init__(
            f"insufficient stock: would result in {boxes} boxes, {units} units"
        )


class StorageUnavailable(StockroomError):
    def __init__(self, operation: str, identifier: str = None):
        self.operation = operation
        self.identifier = identifier
        where = f" ({identifier})" if identifier else ""
        super().__init__(f"storage failure during {operation}{where}")
