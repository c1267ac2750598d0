import pytest

from storefront.catalog import PRODUCTS, validate_cart_item, calculate_total, catalog_snapshot


def _item(**overrides):
    item = {"design": "Drinks", "size": "M", "color": "Black", "quantity": 1}
    item.update(overrides)
    return item


@pytest.mark.parametrize("size", ["XS", "3XL", "", None, "m", 42])
def test_invalid_size_is_rejected(size):
    result = validate_cart_item(_item(size=size))
    assert result["valid"] is False
    assert result["price"] is None
    assert any(e.startswith("Invalid size") for e in result["errors"])


@pytest.mark.parametrize("size,expected", [("S", 30), ("M", 30), ("L", 30), ("XL", 32), ("2XL", 32)])
def test_price_comes_from_catalog_not_client(size, expected):
    result = validate_cart_item(_item(size=size, price=1))
    assert result["valid"] is True
    assert result["errors"] == []
    assert result["price"] == expected


def test_invalid_design_and_color_collect_errors():
    result = validate_cart_item(_item(design="Unicorn", color="Green"))
    assert result["valid"] is False
    assert len(result["errors"]) == 2
    assert result["errors"][0].startswith("Invalid design: Unicorn")
    assert result["errors"][1].startswith("Invalid color: Green")
    # La taille reste valide: le prix est quand même renvoyé
    assert result["price"] == 30


@pytest.mark.parametrize("quantity", [0, 11, -1, 2.5, "2", True, None])
def test_invalid_quantity(quantity):
    result = validate_cart_item(_item(quantity=quantity))
    assert result["valid"] is False
    assert result["errors"] == [f"Invalid quantity: {quantity}. Must be between 1 and 10"]


def test_integral_float_quantity_is_accepted():
    assert validate_cart_item(_item(quantity=2.0))["valid"] is True


def test_surrounding_whitespace_is_ignored():
    result = validate_cart_item(_item(design=" Drinks ", size="XL ", color=" Purple"))
    assert result["valid"] is True
    assert result["price"] == 32


def test_calculate_total_reference_example():
    result = calculate_total([{"design": "Drinks", "size": "M", "color": "Black", "quantity": 2}])
    assert result["valid"] is True
    assert result["subtotal"] == 60
    assert result["shipping"] == 5
    assert result["total"] == 65
    validated = result["validated_items"][0]
    assert validated["server_price"] == 30
    assert validated["item_total"] == 60


def test_calculate_total_ignores_client_price():
    items = [
        _item(size="S", quantity=3, price=1),
        _item(size="2XL", quantity=2, price=0),
        _item(design="Gender", size="XL", color="Gray", quantity=1, price=999),
    ]
    result = calculate_total(items)
    expected_subtotal = 30 * 3 + 32 * 2 + 32 * 1
    assert result["subtotal"] == expected_subtotal
    assert result["total"] == expected_subtotal + PRODUCTS["shipping"]
    assert [i["price"] for i in result["validated_items"]] == [1, 0, 999]
    assert sum(i["item_total"] for i in result["validated_items"]) == result["subtotal"]


def test_calculate_total_returns_first_invalid_item_errors():
    items = [_item(), _item(size="XS"), _item(color="Green")]
    result = calculate_total(items)
    assert result == {
        "valid": False,
        "errors": ["Invalid size: XS. Valid sizes: S, M, L, XL, 2XL"],
    }


def test_calculate_total_empty_cart_only_shipping():
    result = calculate_total([])
    assert result["valid"] is True
    assert result["subtotal"] == 0
    assert result["total"] == PRODUCTS["shipping"]


def test_catalog_snapshot_lists_prices():
    snap = catalog_snapshot()
    assert {"name": "XL", "price": 32} in snap["sizes"]
    assert snap["designs"] == PRODUCTS["designs"]
    assert snap["shipping"] == 5
    assert snap["limits"]["max_cart_items"] == 10
