from shopledger.utils.validators import is_valid_email, is_valid_shop_name, is_valid_timer


def test_shop_name_validation():
    """Тест валидации названия магазина"""

    assert is_valid_shop_name("Магазин №1")
    assert is_valid_shop_name("North Branch")
    assert is_valid_shop_name("Магазин на ул. Ленина, 10")

    assert not is_valid_shop_name("")
    assert not is_valid_shop_name("   ")
    assert not is_valid_shop_name("М" * 101)
    assert not is_valid_shop_name("Shop;DROP TABLE shops;")


def test_email_validation():
    assert is_valid_email("shop1@example.com")
    assert not is_valid_email("shop1@")
    assert not is_valid_email("")


def test_timer_validation():
    assert is_valid_timer("17:30")
    assert is_valid_timer("00:00")
    assert is_valid_timer("23:59")

    assert not is_valid_timer("24:00")
    assert not is_valid_timer("7:30")
    assert not is_valid_timer("17:60")
    assert not is_valid_timer(None)
