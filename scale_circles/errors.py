INVALID_UNITS_CODE = 33


class InvalidUnitsError(AssertionError):
    """Raised when a unit system outside UnitSystem is configured"""

    def __init__(self, units):
        self.code = INVALID_UNITS_CODE
        self.units = units
        super().__init__(f"Invalid units: {units!r} (assertion {INVALID_UNITS_CODE})")
