from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Simulation',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('text_input', models.TextField(blank=True)),
                ('mapping_a', models.CharField(max_length=2)),
                ('mapping_c', models.CharField(max_length=2)),
                ('mapping_g', models.CharField(max_length=2)),
                ('mapping_t', models.CharField(max_length=2)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'verbose_name': 'Simulation',
                'verbose_name_plural': 'Simulations',
                'db_table': 'simulations',
                'ordering': ['created_at', 'id'],
            },
        ),
    ]
