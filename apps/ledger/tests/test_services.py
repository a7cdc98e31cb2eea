import pytest
import uuid
from decimal import Decimal
from datetime import date, datetime, timedelta, timezone as dt_timezone
from apps.ledger.domain import InstallmentMember
from apps.ledger.exceptions import (
    ValidationFailedError,
    InvalidAmountError,
    InvalidInstallmentError,
)
from apps.ledger.models import (
    TransactionType,
    TransactionCategory,
    TransactionStatus,
    Payer,
    InstallmentValueType,
)
from apps.ledger.services import InstallmentService


@pytest.fixture
def template():
    return {
        'property_id': uuid.uuid4(),
        'description': 'Reforma banheiro',
        'type': TransactionType.EXPENSE,
        'category': TransactionCategory.RENOVATION,
        'payer': Payer.PAULO,
        'status': TransactionStatus.PENDING,
    }


# =============================================================================
# Amount resolution
# =============================================================================

class TestResolveAmount:
    """Tests for InstallmentService.resolve_amount"""

    def test_total_is_divided(self):
        amount = InstallmentService.resolve_amount(Decimal('1200.00'), 3, InstallmentValueType.TOTAL)
        assert amount == Decimal('400.00')

    def test_total_rounds_half_up_to_cents(self):
        assert InstallmentService.resolve_amount(Decimal('100'), 3, 'total') == Decimal('33.33')
        assert InstallmentService.resolve_amount(Decimal('0.05'), 2, 'total') == Decimal('0.03')

    @pytest.mark.parametrize('total,count', [
        (Decimal('100.00'), 3),
        (Decimal('1000.00'), 7),
        (Decimal('999.99'), 12),
        (Decimal('50.01'), 60),
    ])
    def test_divided_group_sums_to_total(self, total, count):
        """Sum of the siblings is within N half-cents of the declared total."""
        per_unit = InstallmentService.resolve_amount(total, count, InstallmentValueType.TOTAL)
        assert abs(per_unit * count - total) <= Decimal('0.005') * count

    def test_single_is_kept(self):
        amount = InstallmentService.resolve_amount(Decimal('100.00'), 3, InstallmentValueType.SINGLE)
        assert amount == Decimal('100.00')

    def test_unknown_value_type(self):
        with pytest.raises(InvalidInstallmentError):
            InstallmentService.resolve_amount(Decimal('100.00'), 3, 'weekly')

    def test_invalid_count(self):
        with pytest.raises(InvalidInstallmentError):
            InstallmentService.resolve_amount(Decimal('100.00'), 1, 'total')


# =============================================================================
# Generation
# =============================================================================

class TestGenerate:
    """Tests for InstallmentService.generate"""

    def test_generates_count_siblings(self, template):
        siblings = InstallmentService.generate(template, 5, date(2024, 1, 10), Decimal('50.00'))
        assert len(siblings) == 5

    def test_group_identity(self, template):
        """One shared group id, current 1..N in order, total N."""
        siblings = InstallmentService.generate(template, 4, date(2024, 1, 10), Decimal('50.00'))

        group_ids = {tx.installment_group_id for tx in siblings}
        assert len(group_ids) == 1
        assert [tx.installment_current for tx in siblings] == [1, 2, 3, 4]
        assert all(tx.installment_total == 4 for tx in siblings)

    def test_group_ids_differ_between_groups(self, template):
        first = InstallmentService.generate(template, 2, date(2024, 1, 10), Decimal('50.00'))
        second = InstallmentService.generate(template, 2, date(2024, 1, 10), Decimal('50.00'))
        assert first[0].installment_group_id != second[0].installment_group_id

    def test_sibling_ids_are_unique(self, template):
        siblings = InstallmentService.generate(template, 10, date(2024, 1, 10), Decimal('50.00'))
        assert len({tx.id for tx in siblings}) == 10

    def test_membership_variant(self, template):
        siblings = InstallmentService.generate(template, 3, date(2024, 1, 10), Decimal('50.00'))
        membership = siblings[1].get_membership()

        assert isinstance(membership, InstallmentMember)
        assert membership.current == 2
        assert membership.total == 3
        assert membership.label() == '(2/3)'

    def test_dates_roll_over_short_months(self, template):
        """2024-01-31 x3 -> 2024-01-31, 2024-03-02, 2024-03-31."""
        siblings = InstallmentService.generate(template, 3, date(2024, 1, 31), Decimal('50.00'))
        assert [tx.date for tx in siblings] == [
            date(2024, 1, 31),
            date(2024, 3, 2),
            date(2024, 3, 31),
        ]

    def test_dates_keep_day_of_month(self, template):
        siblings = InstallmentService.generate(template, 3, date(2024, 11, 15), Decimal('50.00'))
        assert [tx.date for tx in siblings] == [
            date(2024, 11, 15),
            date(2024, 12, 15),
            date(2025, 1, 15),
        ]

    def test_created_at_increases_by_millisecond(self, template):
        now = datetime(2024, 1, 1, 12, 0, tzinfo=dt_timezone.utc)
        siblings = InstallmentService.generate(template, 3, date(2024, 1, 10), Decimal('50.00'), now=now)
        assert [tx.created_at for tx in siblings] == [
            now,
            now + timedelta(milliseconds=1),
            now + timedelta(milliseconds=2),
        ]

    def test_every_sibling_carries_same_amount(self, template):
        siblings = InstallmentService.generate(template, 6, date(2024, 1, 10), Decimal('33.33'))
        assert {tx.amount for tx in siblings} == {Decimal('33.33')}

    def test_template_fields_are_copied(self, template):
        siblings = InstallmentService.generate(template, 2, date(2024, 1, 10), Decimal('50.00'))
        for tx in siblings:
            assert tx.property_id == template['property_id']
            assert tx.description == 'Reforma banheiro'
            assert tx.category == TransactionCategory.RENOVATION
            assert tx.payer == Payer.PAULO

    def test_siblings_are_unsaved(self, template):
        siblings = InstallmentService.generate(template, 2, date(2024, 1, 10), Decimal('50.00'))
        assert all(tx._state.adding for tx in siblings)

    @pytest.mark.parametrize('count', [0, 1, -3, 61, '3', 2.5, True])
    def test_rejects_invalid_count(self, template, count):
        with pytest.raises(InvalidInstallmentError):
            InstallmentService.generate(template, count, date(2024, 1, 10), Decimal('50.00'))

    def test_accepts_count_bounds(self, template):
        assert len(InstallmentService.generate(template, 2, date(2024, 1, 10), Decimal('1.00'))) == 2
        assert len(InstallmentService.generate(template, 60, date(2024, 1, 10), Decimal('1.00'))) == 60

    @pytest.mark.parametrize('amount', [
        Decimal('0'),
        Decimal('-5'),
        Decimal('NaN'),
        Decimal('Infinity'),
        float('inf'),
        'abc',
        None,
    ])
    def test_rejects_invalid_amount(self, template, amount):
        with pytest.raises(InvalidAmountError):
            InstallmentService.generate(template, 3, date(2024, 1, 10), amount)

    @pytest.mark.parametrize('start', [date(9999, 12, 15), date(9999, 12, 31)])
    def test_dates_past_calendar_end(self, template, start):
        with pytest.raises(InvalidInstallmentError):
            InstallmentService.generate(template, 2, start, Decimal('50.00'))

    def test_last_representable_month(self, template):
        siblings = InstallmentService.generate(template, 2, date(9999, 11, 15), Decimal('50.00'))
        assert siblings[-1].date == date(9999, 12, 15)

    def test_max_installments_follows_settings(self, template, settings):
        settings.LEDGER_MAX_INSTALLMENTS = 12
        with pytest.raises(InvalidInstallmentError):
            InstallmentService.generate(template, 13, date(2024, 1, 10), Decimal('1.00'))


# =============================================================================
# Form entries
# =============================================================================

class TestBuildFromEntry:
    """Tests for InstallmentService.build_from_entry"""

    def test_standalone_entry(self, make_entry):
        created = InstallmentService.build_from_entry(make_entry())

        assert len(created) == 1
        assert created[0].amount == Decimal('1200.00')
        assert created[0].installment_group_id is None
        assert created[0].get_membership().label() == ''

    def test_installment_entry_with_total(self, make_entry):
        entry = make_entry(is_installment=True, installments_count=3, installment_value_type='total')
        created = InstallmentService.build_from_entry(entry)

        assert len(created) == 3
        assert all(tx.amount == Decimal('400.00') for tx in created)

    def test_installment_entry_with_single_value(self, make_entry):
        entry = make_entry(is_installment=True, installments_count=3, installment_value_type='single')
        created = InstallmentService.build_from_entry(entry)

        assert all(tx.amount == Decimal('1200.00') for tx in created)
        assert sum(tx.amount for tx in created) == Decimal('3600.00')

    def test_description_is_trimmed(self, make_entry):
        created = InstallmentService.build_from_entry(make_entry(description='  IPTU  '))
        assert created[0].description == 'IPTU'

    @pytest.mark.parametrize('description', ['', '   '])
    def test_missing_description(self, make_entry, description):
        with pytest.raises(ValidationFailedError):
            InstallmentService.build_from_entry(make_entry(description=description))

    def test_missing_amount(self, make_entry):
        with pytest.raises(ValidationFailedError):
            InstallmentService.build_from_entry(make_entry(amount=None))

    def test_installment_entry_with_bad_count(self, make_entry):
        with pytest.raises(InvalidInstallmentError):
            InstallmentService.build_from_entry(make_entry(is_installment=True, installments_count=1))
