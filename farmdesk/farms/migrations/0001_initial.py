# Generated manually

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Farm',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('location', models.CharField(blank=True, max_length=255)),
                ('size', models.DecimalField(blank=True, decimal_places=2, help_text='Area in hectares', max_digits=12, null=True)),
                ('farm_type', models.CharField(choices=[('mixed', 'Mixed'), ('livestock', 'Livestock'), ('crop', 'Crop')], default='mixed', max_length=20)),
                ('description', models.TextField(blank=True)),
                ('coordinates', models.CharField(blank=True, max_length=100)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('admin', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='administered_farms', to=settings.AUTH_USER_MODEL)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_farms', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'farms',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='UserFarm',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('role', models.CharField(choices=[('admin', 'Admin'), ('manager', 'Manager'), ('worker', 'Worker'), ('specialist', 'Specialist'), ('member', 'Member')], default='member', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('farm', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='memberships', to='farms.farm')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='farm_memberships', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'user_farms',
                'ordering': ['farm', 'user'],
                'unique_together': {('user', 'farm')},
            },
        ),
        migrations.CreateModel(
            name='UserPermission',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('module', models.CharField(choices=[('animals', 'Animals'), ('crops', 'Crops'), ('inventory', 'Inventory'), ('tasks', 'Tasks'), ('financial', 'Financial'), ('goals', 'Goals'), ('administration', 'Administration')], max_length=20)),
                ('access_level', models.CharField(choices=[('none', 'No Access'), ('read_only', 'Read Only'), ('edit', 'Edit'), ('manage', 'Manage'), ('full', 'Full Access')], default='none', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('farm', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='permissions', to='farms.farm')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='farm_permissions', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'farm_user_permissions',
                'ordering': ['farm', 'user', 'module'],
                'unique_together': {('user', 'farm', 'module')},
            },
        ),
    ]
