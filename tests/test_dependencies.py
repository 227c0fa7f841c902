import pytest

from shopfront.core.dependencies import DependencyContainer
from shopfront.services.product_service import ProductService


def test_factory_runs_once_and_is_cached():
    container = DependencyContainer()
    built = []
    container.register_factory(ProductService, lambda: built.append(1) or object())

    first = container.get(ProductService)

    assert container.get(ProductService) is first
    assert built == [1]


def test_unregistered_service():
    with pytest.raises(ValueError, match="ProductService not registered"):
        DependencyContainer().get(ProductService)
