import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('assignment', '0001_initial'),
        ('fleet', '0001_initial'),
        ('orders', '0001_initial'),
        ('shops', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='DispatchRecord',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('tracking_number', models.CharField(max_length=64)),
                ('estimated_delivery_time', models.DateTimeField(blank=True, null=True)),
                ('transport_cost', models.DecimalField(blank=True, decimal_places=2, max_digits=10, null=True)),
                ('notes', models.TextField(blank=True)),
                ('status', models.CharField(choices=[('assigned', 'Assigned')], default='assigned', max_length=20)),
                ('created_by', models.CharField(blank=True, max_length=150)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('assignment', models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='dispatch_record', to='assignment.driverassignment')),
                ('driver', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='dispatches', to='fleet.driver')),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='dispatches', to='orders.ecommerceorder')),
                ('shop', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='dispatches', to='shops.shop')),
            ],
            options={
                'ordering': ['-created_at', '-id'],
                'indexes': [models.Index(fields=['tracking_number'], name='dispatch_tracking_idx')],
            },
        ),
    ]
