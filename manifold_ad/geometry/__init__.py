from .metric import MetricTensorField
from .christoffel import christoffel_first_kind, christoffel_second_kind

__all__ = ["MetricTensorField", "christoffel_first_kind", "christoffel_second_kind"]
