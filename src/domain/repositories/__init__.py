"""Domain repository interfaces.

All abstractions are defined here with abc.ABC and @abstractmethod.
Concrete implementations are owned by the persistence collaborator and
wired at the application boundary via dependency injection.
"""

from .optimization import OptimizationResultRepository

__all__ = ["OptimizationResultRepository"]
