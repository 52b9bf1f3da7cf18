from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='ContactViewQuota',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('user_id', models.CharField(max_length=255)),
                ('view_date', models.DateField()),
                ('view_count', models.PositiveIntegerField(default=0)),
            ],
            options={
                'verbose_name': 'Contact view quota',
                'verbose_name_plural': 'Contact view quotas',
                'constraints': [models.UniqueConstraint(fields=('user_id', 'view_date'), name='usage_unique_user_view_date')],
            },
        ),
    ]
