"""Officer entity — a collections officer who owns customer accounts."""

from dataclasses import dataclass, field

DEFAULT_MAX_CASELOAD = 50
DEFAULT_PRIORITY_WEIGHT = 1.0


@dataclass
class Capacity:
    max_caseload: int = DEFAULT_MAX_CASELOAD
    priority_weight: float = DEFAULT_PRIORITY_WEIGHT
    external_load: int = 0  # caseload tracked outside the roster


@dataclass
class Officer:
    id: int | None
    username: str
    specialization: str
    capacity: Capacity = field(default_factory=Capacity)
    roster: set[int] = field(default_factory=set)
    is_active: bool = True

    @property
    def current_load(self) -> int:
        return self.capacity.external_load + len(self.roster)

    def has_room(self) -> bool:
        return self.current_load < self.capacity.max_caseload

    def is_over_capacity(self) -> bool:
        return self.current_load > self.capacity.max_caseload

    def specializes_in(self, product_type: str) -> bool:
        return self.specialization == product_type

    def owns(self, customer_id: int) -> bool:
        return customer_id in self.roster
