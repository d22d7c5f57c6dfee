class PlanningError(Exception):
    """Raised before any job runs; aborts the whole run with no side effects."""


class EmptyPatternError(PlanningError):
    def __init__(self):
        super().__init__("The pattern can not be empty.")


class OutputCountMismatchError(PlanningError):
    def __init__(self, output_count: int, input_count: int):
        self.output_count = output_count
        self.input_count = input_count
        super().__init__("The number of the output files must match the number of the input files.")
