# Generated manually for ledger app

import uuid
from decimal import Decimal
from django.core.validators import MinValueValidator
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('properties', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Transaction',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('description', models.CharField(max_length=255)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12, validators=[MinValueValidator(Decimal('0.01'))])),
                ('date', models.DateField()),
                ('type', models.CharField(choices=[('revenue', 'Receita'), ('expense', 'Despesa')], max_length=10)),
                ('category', models.CharField(choices=[('revenue', 'RECEITAS'), ('acquisition', 'AQUISIÇÃO'), ('renovation', 'REFORMA'), ('monthly', 'MENSAIS'), ('other', 'OUTROS')], max_length=20)),
                ('payer', models.CharField(choices=[('Todos', 'Todos'), ('Cida', 'Cida'), ('Michell', 'Michell'), ('Paulo', 'Paulo'), ('William', 'William')], default='Cida', max_length=20)),
                ('status', models.CharField(choices=[('paid', 'Pago'), ('pending', 'Pendente')], default='pending', max_length=10)),
                ('installment_group_id', models.UUIDField(blank=True, db_index=True, null=True)),
                ('installment_current', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('installment_total', models.PositiveSmallIntegerField(blank=True, null=True)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('property', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='transactions', to='properties.property')),
            ],
            options={
                'db_table': 'transactions',
                'ordering': ['-date', '-created_at'],
            },
        ),
        migrations.AddIndex(
            model_name='transaction',
            index=models.Index(fields=['property', 'date'], name='transaction_prop_date_idx'),
        ),
        migrations.AddIndex(
            model_name='transaction',
            index=models.Index(fields=['property', 'status'], name='transaction_prop_status_idx'),
        ),
        migrations.AddIndex(
            model_name='transaction',
            index=models.Index(fields=['date'], name='transaction_date_idx'),
        ),
        migrations.AddConstraint(
            model_name='transaction',
            constraint=models.CheckConstraint(
                condition=(
                    models.Q(
                        installment_group_id__isnull=True,
                        installment_current__isnull=True,
                        installment_total__isnull=True,
                    ) | models.Q(
                        installment_group_id__isnull=False,
                        installment_current__gte=1,
                        installment_total__gte=models.F('installment_current'),
                    )
                ),
                name='transaction_installment_complete',
            ),
        ),
    ]
