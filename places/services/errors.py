"""
Service-layer errors, translated to HTTP status codes by the routers
"""


class RestaurantNotFoundError(Exception):
    def __init__(self, restaurant_id: int):
        self.restaurant_id = restaurant_id
        super().__init__("Restaurant not found")


class RestaurantValidationError(ValueError):
    """Request is missing required input or has nothing to change"""


class StorageError(Exception):
    """A statement failed and the transaction was rolled back"""
