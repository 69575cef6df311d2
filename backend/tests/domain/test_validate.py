import logging

import pytest

from dessert_optimizer.core.errors import DomainError
from dessert_optimizer.domain.schema import DessertRequest, Ingredient
from dessert_optimizer.domain.validate import validate_request
from tests.dessert_scenario_factory import DessertScenarioFactory


class TestValidate:
    def test_valid_request_passes(self):
        validate_request(DessertScenarioFactory.chocolate_strawberry())

    def test_empty_ingredients_raise(self):
        req = DessertRequest(ingredients=[])
        with pytest.raises(DomainError, match="at least one ingredient"):
            validate_request(req)

    def test_duplicate_names_are_warned_not_rejected(self, caplog):
        req = DessertRequest(
            ingredients=[
                Ingredient(name="Cream", price=1.0, calories=300.0),
                Ingredient(name="cream", price=2.0, calories=100.0),
            ]
        )

        with caplog.at_level(logging.WARNING, logger="dessert_optimizer"):
            validate_request(req)

        assert "Duplicate ingredient names ['cream']" in caplog.text
