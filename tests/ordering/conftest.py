import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def ordering_bed():
    from ordering.domain import ordering

    bed = DomainFixture(ordering)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(ordering_bed):
    with ordering_bed.domain_context():
        yield


@pytest.fixture()
def store():
    from ordering.cart.storage import MemoryCartStore

    return MemoryCartStore()


@pytest.fixture()
def cart(store):
    from ordering.cart.cart import Cart

    return Cart(store=store)


@pytest.fixture()
def make_line():
    """Factory for raw cart lines as the catalog UI sends them."""

    def _make_line(product_id="p1", quantity=3, **overrides):
        data = {
            "product_id": product_id,
            "name": f"Product {product_id}",
            "unit_price": 1000.0,
            "image_ref": f"{product_id}.jpg",
            "quantity": quantity,
            "per_line_unit_cap": 10,
            "box_eligible": False,
            "is_box": False,
        }
        data.update(overrides)
        return data

    return _make_line
