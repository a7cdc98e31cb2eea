import pytest
import uuid
from decimal import Decimal
from datetime import date, datetime, timezone as dt_timezone
import fitz
from apps.properties.models import Property
from apps.ledger.models import Transaction
from apps.reports.pdf import build_property_report, printable, report_filename, report_rows


@pytest.fixture
def prop():
    return Property(name='Casa de Praia')


def build(prop, **overrides):
    fields = {
        'property_id': prop.id,
        'description': 'Condomínio',
        'amount': Decimal('100.00'),
        'date': date(2024, 1, 10),
        'type': 'expense',
        'category': 'monthly',
        'payer': 'Cida',
        'status': 'pending',
    }
    fields.update(overrides)
    return Transaction(**fields)


def page_texts(pdf):
    with fitz.open(stream=pdf, filetype='pdf') as doc:
        return [page.get_text() for page in doc]


class TestReportRows:
    """Tests for report_rows"""

    def test_expense_row(self, prop):
        rows = report_rows([build(prop, amount=Decimal('1234.50'), status='paid')])

        assert rows == [(
            '10/01/2024',
            'Condomínio',
            'MENSAIS',
            'Cida',
            'Pago',
            '-R$ 1.234,50',
        )]

    def test_revenue_is_positive(self, prop):
        rows = report_rows([build(prop, type='revenue', category='revenue', amount=Decimal('300'))])
        assert rows[0][5] == '+R$ 300,00'
        assert rows[0][2] == 'RECEITAS'

    def test_installment_suffix(self, prop):
        tx = build(
            prop,
            description='Reforma',
            installment_group_id=uuid.uuid4(),
            installment_current=2,
            installment_total=5,
        )
        assert report_rows([tx])[0][1] == 'Reforma (2/5)'

    def test_keeps_order(self, prop):
        rows = report_rows([
            build(prop, description='B'),
            build(prop, description='A'),
        ])
        assert [r[1] for r in rows] == ['B', 'A']


class TestReportFilename:

    def test_filename(self, prop):
        now = datetime(2024, 1, 1, tzinfo=dt_timezone.utc)
        assert report_filename(prop, now=now) == 'relatorio_casa_de_praia_1704067200000.pdf'

    def test_collapses_whitespace(self):
        now = datetime(2024, 1, 1, tzinfo=dt_timezone.utc)
        name = report_filename(Property(name='Apto  42 Centro'), now=now)
        assert name.startswith('relatorio_apto_42_centro_')


class TestBuildReport:
    """Tests for build_property_report"""

    def test_is_a_pdf(self, prop):
        pdf = build_property_report(prop, [build(prop)])
        assert pdf.startswith(b'%PDF')

    def test_title_and_rows(self, prop):
        generated_at = datetime(2024, 5, 20, 12, 0, tzinfo=dt_timezone.utc)
        pdf = build_property_report(
            prop,
            [build(prop, description='IPTU', amount=Decimal('1240.50'))],
            generated_at=generated_at,
        )

        text = page_texts(pdf)[0]
        assert 'Relatório Financeiro - Casa de Praia' in text
        assert 'Gerado em: 20/05/2024' in text
        assert 'Descrição' in text
        assert 'IPTU' in text
        assert '-R$ 1.240,50' in text

    def test_long_description_is_truncated(self, prop):
        pdf = build_property_report(prop, [build(prop, description='Reforma ' * 20)])
        assert '...' in page_texts(pdf)[0]

    def test_empty_report_has_one_page(self, prop):
        assert len(page_texts(build_property_report(prop, []))) == 1

    def test_paginates(self, prop):
        transactions = [build(prop, description=f'Item {i}') for i in range(120)]

        texts = page_texts(build_property_report(prop, transactions))

        assert len(texts) == 3
        assert all('Descrição' in text for text in texts)
        assert 'Item 119' in texts[-1]

    def test_characters_outside_latin1_are_marked(self, prop):
        pdf = build_property_report(prop, [build(prop, description='Reforma 🏠 ação')])
        assert 'Reforma ? ação' in page_texts(pdf)[0]


class TestPrintable:
    """Tests for printable"""

    def test_keeps_portuguese_text(self):
        assert printable('Descrição São João') == 'Descrição São João'

    def test_replaces_unsupported_characters(self):
        assert printable('Taxa €50 🏠') == 'Taxa ?50 ?'

    def test_accepts_non_strings(self):
        assert printable(42) == '42'
