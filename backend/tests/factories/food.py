"""Factory Boy definition for :class:`backoffice.models.food.Food`."""

from __future__ import annotations

import factory
from backoffice.models.food import Food

from tests.factories import BaseFactory
from tests.factories.category import CategoryFactory
from tests.factories.tenant import TenantFactory


class FoodFactory(BaseFactory):
    class Meta:
        model = Food

    name = factory.Sequence(lambda n: f"Food {n}")
    price = 9.5
    description = factory.Faker("sentence")
    image_url = None
    tenant = factory.SubFactory(TenantFactory)
    # Same tenant as the item unless a category is passed explicitly.
    category = factory.SubFactory(CategoryFactory, tenant=factory.SelfAttribute("..tenant"))
