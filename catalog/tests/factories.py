from decimal import Decimal

import factory
from catalog.models import Category, Service
from users.tests.factories import StudentFactory


class CategoryFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Category
        django_get_or_create = ("slug",)

    name = factory.Sequence(lambda n: f"Category {n}")
    slug = factory.Sequence(lambda n: f"category-{n}")


class ServiceFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Service

    seller = factory.SubFactory(StudentFactory)
    category = factory.SubFactory(CategoryFactory)
    title = factory.Sequence(lambda n: f"Essay proofreading #{n}")
    description = "Careful proofreading within the agreed delivery time."
    price = Decimal("100.00")
    delivery_days = 3
