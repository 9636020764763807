from .customer import MEASUREMENT_FIELDS, Customer

__all__ = ["Customer", "MEASUREMENT_FIELDS"]
