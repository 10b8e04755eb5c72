import pytest

from comic_collector.service.store.domain.entity.item_entity import ItemEntity
from comic_collector.service.store.domain.entity.user_entity import UserEntity
from comic_collector.service.store.domain.store_errors import (
    InvalidEmailError,
    InvalidItemError,
    InvalidUserError,
)
from comic_collector.service.store.domain.value_object.email import Email
from comic_collector.service.store.domain.value_object.money import Money


@pytest.mark.unit
class TestItemEntity:
    def test_create_trims_fields_and_assigns_id(self) -> None:
        item = ItemEntity.create(name='  Condorito  ', description=' Classic ', price=Money.pesos(900))

        assert item.name == 'Condorito'
        assert item.description == 'Classic'
        assert item.id is not None

    @pytest.mark.parametrize(
        'name, description, price',
        [
            ('', 'desc', Money.pesos(1)),
            ('name', '  ', Money.pesos(1)),
            ('name', 'desc', None),
            ('name', 'desc', 1000),
        ],
    )
    def test_create_rejects_invalid_fields(self, name, description, price) -> None:
        with pytest.raises(InvalidItemError):
            ItemEntity.create(name=name, description=description, price=price)

    def test_identity_is_by_id(self) -> None:
        item = ItemEntity.create(name='A', description='B', price=Money.pesos(1))
        twin = ItemEntity(id=item.id, name='Other', description='Other', price=Money.pesos(2))

        assert item == twin
        assert len({item, twin}) == 1

    def test_mutators_validate(self) -> None:
        item = ItemEntity.create(name='A', description='B', price=Money.pesos(1))

        item.rename('Renamed')
        item.reprice(Money.pesos(5))

        assert item.name == 'Renamed'
        assert item.price == Money.pesos(5)
        with pytest.raises(InvalidItemError):
            item.describe('')


@pytest.mark.unit
class TestUserEntity:
    def test_create(self) -> None:
        user = UserEntity.create(first_name=' Ana ', last_name='Rojas', email='ANA@example.com')

        assert user.full_name == 'Ana Rojas'
        assert user.email == Email('ana@example.com')
        assert user.id is None

    def test_rejects_blank_names_and_bad_email(self) -> None:
        with pytest.raises(InvalidUserError):
            UserEntity.create(first_name='', last_name='Rojas', email='ana@example.com')
        with pytest.raises(InvalidEmailError):
            UserEntity.create(first_name='Ana', last_name='Rojas', email='not-an-email')

    def test_unsaved_users_are_only_equal_to_themselves(self) -> None:
        a = UserEntity.create(first_name='Ana', last_name='Rojas', email='ana@example.com')
        b = UserEntity.create(first_name='Ana', last_name='Rojas', email='ana@example.com')

        assert a == a
        assert a != b

        a.id = b.id = 7
        assert a == b
