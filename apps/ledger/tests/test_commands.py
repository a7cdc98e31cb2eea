import pytest
from decimal import Decimal
from io import StringIO
from django.core.management import call_command
from apps.properties.models import Property
from apps.ledger.models import Transaction, TransactionStatus


@pytest.mark.django_db
class TestCreateSampleData:
    """Tests for the create_sample_data management command"""

    def run(self, *args):
        out = StringIO()
        call_command('create_sample_data', *args, stdout=out)
        return out.getvalue()

    def test_creates_properties_and_transactions(self):
        output = self.run()

        assert 'Sample data created successfully!' in output
        assert list(Property.objects.values_list('name', flat=True)) == [
            'Apartamento Centro',
            'Casa de Praia',
        ]
        # 10 entries + 10 installments + 1 revenue + 3 installments
        assert Transaction.objects.count() == 24

    def test_installment_group_is_divided(self):
        self.run()

        furniture = Transaction.objects.filter(description='Móveis planejados')
        assert furniture.count() == 10
        assert {t.amount for t in furniture} == {Decimal('1200.00')}
        assert furniture.filter(status=TransactionStatus.PAID).count() == 2
        assert set(furniture.filter(status=TransactionStatus.PAID)
                   .values_list('installment_current', flat=True)) == {1, 2}

    def test_single_value_installments(self):
        self.run()

        insurance = Transaction.objects.filter(description='Seguro residencial')
        assert {t.amount for t in insurance} == {Decimal('210.00')}
        assert {t.property.name for t in insurance} == {'Casa de Praia'}

    def test_clear_replaces_existing_data(self):
        self.run()
        self.run('--clear')

        assert Property.objects.count() == 2
        assert Transaction.objects.count() == 24

    def test_without_clear_appends(self):
        self.run()
        self.run()

        assert Property.objects.count() == 2
        assert Transaction.objects.count() == 48
