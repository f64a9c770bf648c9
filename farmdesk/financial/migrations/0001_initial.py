# Generated manually

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('farms', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Cost',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('date', models.DateField()),
                ('category', models.CharField(choices=[('feed', 'Feed'), ('medicine', 'Medicine'), ('seeds', 'Seeds'), ('fertilizer', 'Fertilizer'), ('equipment', 'Equipment'), ('labor', 'Labor'), ('fuel', 'Fuel'), ('maintenance', 'Maintenance'), ('utilities', 'Utilities'), ('transport', 'Transport'), ('veterinary', 'Veterinary'), ('other', 'Other')], default='other', max_length=20)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12)),
                ('description', models.CharField(max_length=255)),
                ('supplier', models.CharField(blank=True, max_length=255)),
                ('payment_method', models.CharField(blank=True, choices=[('cash', 'Cash'), ('bank_transfer', 'Bank Transfer'), ('card', 'Card'), ('check', 'Check'), ('other', 'Other')], max_length=20)),
                ('document_number', models.CharField(blank=True, max_length=100)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='costs', to=settings.AUTH_USER_MODEL)),
                ('farm', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='costs', to='farms.farm')),
            ],
            options={
                'db_table': 'costs',
                'ordering': ['-date', '-id'],
                'indexes': [
                    models.Index(fields=['farm', 'date'], name='cost_farm_date_idx'),
                    models.Index(fields=['farm', 'category'], name='cost_farm_category_idx'),
                ],
            },
        ),
    ]
