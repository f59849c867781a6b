"""Domain errors raised by the assignment engine."""


class AssignmentError(Exception):
    """Base class for assignment failures that callers may act on."""


class NotFoundError(AssignmentError):
    def __init__(self, entity: str, entity_id: int):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity.capitalize()} {entity_id} not found")


class SpecializationMismatchError(AssignmentError):
    def __init__(self, officer_id: int, specialization: str, product_type: str):
        self.officer_id = officer_id
        self.specialization = specialization
        self.product_type = product_type
        super().__init__(
            f"Specialization mismatch: officer {officer_id} specializes in "
            f"{specialization}, cannot handle {product_type} customer"
        )


class PartialWriteError(AssignmentError):
    """A multi-step ownership change failed midway.

    ``rolled_back`` tells whether the completed steps were compensated, i.e.
    whether the stores are back to their state before the operation.
    """

    def __init__(self, customer_id: int, step: str, rolled_back: bool, cause: Exception):
        self.customer_id = customer_id
        self.step = step
        self.rolled_back = rolled_back
        state = "rolled back" if rolled_back else "NOT rolled back"
        super().__init__(
            f"Reassignment of customer {customer_id} failed at '{step}' "
            f"({type(cause).__name__}); changes {state}"
        )
