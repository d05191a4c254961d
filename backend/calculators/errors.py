"""
Pricing failures. All are non-retryable; the caller fixes input or reloads
the catalog and prices again from scratch.
"""


class PricingError(ValueError):
    """Base for every failure the pricing engine raises."""


class PricingValidationError(PricingError):
    """Input rejected before any pricing was attempted."""


class RuleNotFoundError(PricingError):
    """No active price rule covers the component's board type, material, dimensions and date."""

    def __init__(self, component: str, board_role: str, material_id, dimensions: dict, as_of):
        self.component = component
        self.board_role = board_role
        self.material_id = material_id
        self.dimensions = dimensions
        self.as_of = as_of
        dims = ", ".join(
            "%s=%s" % (name, value) for name, value in dimensions.items() if value is not None
        )
        super().__init__(
            f"No applicable price rule for {component}: board type {board_role}, "
            f"material {material_id}, {dims or 'no dimensions'}, as of {as_of}"
        )


class MissingReferenceDataError(PricingError):
    """A material, product or special part id is not in the catalog."""
