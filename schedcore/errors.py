# Error taxonomy for the simulator


class ConfigurationError(ValueError):
    """Fatal problem with the inputs; raised before (or instead of) a run."""


class WorkloadFormatError(ConfigurationError):
    def __init__(self, source: str, lineno: int, reason: str):
        self.lineno = lineno
        super().__init__(f"{source}:{lineno}: {reason}")


class NonTerminatingRunError(ConfigurationError):
    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(f"simulation did not finish within {limit} ticks")


class SimulationError(RuntimeError):
    """Internal invariant violation inside the engine."""
