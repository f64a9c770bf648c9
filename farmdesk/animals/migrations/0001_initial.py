# Generated manually

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('farms', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Animal',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('identification_code', models.CharField(max_length=50)),
                ('species', models.CharField(max_length=50)),
                ('breed', models.CharField(blank=True, max_length=100)),
                ('gender', models.CharField(choices=[('male', 'Male'), ('female', 'Female')], max_length=10)),
                ('birth_date', models.DateField(blank=True, null=True)),
                ('weight', models.DecimalField(blank=True, decimal_places=2, help_text='Weight in kg', max_digits=8, null=True)),
                ('status', models.CharField(choices=[('healthy', 'Healthy'), ('sick', 'Sick'), ('treatment', 'Under Treatment'), ('quarantine', 'Quarantine'), ('pregnant', 'Pregnant')], default='healthy', max_length=20)),
                ('last_vaccine_date', models.DateField(blank=True, null=True)),
                ('notes', models.TextField(blank=True)),
                ('removed_at', models.DateField(blank=True, null=True)),
                ('removal_reason', models.CharField(blank=True, choices=[('sold', 'Sold'), ('dead', 'Dead'), ('slaughtered', 'Slaughtered'), ('transferred', 'Transferred'), ('other', 'Other')], max_length=20)),
                ('removal_notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('farm', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='animals', to='farms.farm')),
            ],
            options={
                'db_table': 'animals',
                'ordering': ['identification_code'],
                'indexes': [
                    models.Index(fields=['farm', 'status'], name='animal_farm_status_idx'),
                    models.Index(fields=['farm', 'removed_at'], name='animal_farm_removed_idx'),
                ],
                'unique_together': {('farm', 'identification_code')},
            },
        ),
    ]
